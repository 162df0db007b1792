"""Simulation log — a structured record of what each engine decided.

Every engine accepts an optional ``Logger``.  When one is supplied the
engine narrates its run into it: one summary line per simulation, plus
a line per decision (dispatch, placement, eviction, head move) at DEBUG
level.  The presentation layer can then show the log next to the
rendered result, much like ``dmesg`` sits next to a running kernel.

- **LogLevel** — severities ordered for filtering (DEBUG < ERROR).
- **LogEntry** — one immutable record (level, message, source).
- **Logger** — an append-only buffer with filtering and clearing.  With
  ``max_entries`` set it keeps only the newest entries, like a kernel
  ring buffer.

Sources used by the engines: ``cpu``, ``memory``, ``paging``, ``disk``,
``fs`` and ``web``.
"""

from collections import deque
from dataclasses import dataclass
from enum import IntEnum


class LogLevel(IntEnum):
    """Severity levels for log entries (IntEnum so they compare with ``<``)."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The engine that generated the event (e.g. "cpu").

    """

    level: LogLevel
    message: str
    source: str

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Append-only log buffer with filtering."""

    def __init__(
        self,
        *,
        min_level: LogLevel = LogLevel.DEBUG,
        max_entries: int | None = None,
    ) -> None:
        """Create an empty logger.

        Args:
            min_level: Entries below this level are discarded on arrival.
            max_entries: If set, the oldest entries are dropped once this
                many are kept.

        """
        self._min_level = min_level
        self._entries: deque[LogEntry] = deque(maxlen=max_entries)

    @property
    def min_level(self) -> LogLevel:
        """Return the lowest level this logger keeps."""
        return self._min_level

    @property
    def entries(self) -> list[LogEntry]:
        """Return all kept entries in chronological order."""
        return list(self._entries)

    def log(self, level: LogLevel, message: str, *, source: str) -> None:
        """Append a new entry, unless it falls below ``min_level``."""
        if level < self._min_level:
            return
        self._entries.append(LogEntry(level=level, message=message, source=source))

    def debug(self, message: str, *, source: str) -> None:
        """Shorthand for ``log(LogLevel.DEBUG, ...)``."""
        self.log(LogLevel.DEBUG, message, source=source)

    def info(self, message: str, *, source: str) -> None:
        """Shorthand for ``log(LogLevel.INFO, ...)``."""
        self.log(LogLevel.INFO, message, source=source)

    def warning(self, message: str, *, source: str) -> None:
        """Shorthand for ``log(LogLevel.WARNING, ...)``."""
        self.log(LogLevel.WARNING, message, source=source)

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.

        Returns:
            A new list of matching entries.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        return result

    def clear(self) -> None:
        """Remove all log entries."""
        self._entries.clear()

    def __len__(self) -> int:
        """Return the number of kept entries."""
        return len(self._entries)
