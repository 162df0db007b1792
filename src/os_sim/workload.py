"""Workload types — the value structures every engine consumes or returns.

A simulation request is a *snapshot*: the caller hands an engine a
workload (processes, memory requests, a page reference stream, or a
list of cylinders) and gets back a fully materialised result.  Nothing
here has behaviour beyond validation.  These are the nouns that the
scheduler, allocator, pager, and disk scheduler share.

Design choices:
    - **Frozen dataclasses** for everything the caller supplies or
      receives, so a result can never be mutated back into an engine.
    - **Tuples, not lists** in results, for the same reason.
    - **One validation exception** (``ConfigurationError``) for every
      bad knob.  Engines check their input up front and refuse to run
      rather than clamping to something the caller didn't ask for.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Final, TypeVar

IDLE: Final = "IDLE"
"""Process id used for timeline blocks where the CPU had nothing to run."""

PageId = int | str

E = TypeVar("E", bound=StrEnum)


class ConfigurationError(ValueError):
    """Raise when a workload or engine knob is outside its valid range."""


# -- CPU ---------------------------------------------------------------------


@dataclass(frozen=True)
class Process:
    """A unit of CPU work, as described by the caller.

    Attributes:
        id: Caller-assigned identifier, unique within one workload.
        arrival_time: Tick at which the process becomes runnable.
        burst_time: Total CPU ticks the process needs.
        priority: Scheduling priority (lower value = more important).

    """

    id: int
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass(frozen=True)
class ExecutionBlock:
    """A contiguous stretch of the timeline owned by one process (or IDLE)."""

    process_id: int | str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        """Return the number of ticks covered by this block."""
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        """Return True if the CPU was idle during this block."""
        return self.process_id == IDLE

    def __str__(self) -> str:
        """Format as ``P1:0-5`` (or ``IDLE:0-2``)."""
        label = IDLE if self.is_idle else f"P{self.process_id}"
        return f"{label}:{self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class ProcessMetrics:
    """Per-process figures derived when a process completes."""

    completion_time: int
    turnaround_time: int
    waiting_time: int

    @classmethod
    def at_completion(cls, process: Process, completion_time: int) -> ProcessMetrics:
        """Derive the metrics for *process* finishing at *completion_time*."""
        turnaround = completion_time - process.arrival_time
        return cls(
            completion_time=completion_time,
            turnaround_time=turnaround,
            waiting_time=turnaround - process.burst_time,
        )


# -- Memory ------------------------------------------------------------------


@dataclass(frozen=True)
class MemoryRequest:
    """A request for ``size`` contiguous units on behalf of process ``id``."""

    id: int
    size: int


@dataclass(frozen=True)
class MemoryBlock:
    """One piece of the address-space partition.

    Attributes:
        start: First address covered by the block.
        size: Number of addresses covered (always >= 1).
        allocated: Whether a request owns this block.
        owner_id: The owning request id, or None for a free block.

    """

    start: int
    size: int
    allocated: bool = False
    owner_id: int | None = None

    @property
    def end(self) -> int:
        """Return the first address *after* this block."""
        return self.start + self.size

    def __str__(self) -> str:
        """Format as ``alloc 0-10`` or ``free 35-100``."""
        state = "alloc" if self.allocated else "free"
        return f"{state} {self.start}-{self.end}"


# -- Paging ------------------------------------------------------------------


@dataclass(frozen=True)
class HistoryStep:
    """Frame contents right after one reference was serviced."""

    frames: tuple[PageId | None, ...]
    is_fault: bool


# -- Validation helpers ------------------------------------------------------


def require_int(value: int, *, name: str) -> None:
    """Raise ConfigurationError unless *value* is an int (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{name} must be an integer, got {value!r}"
        raise ConfigurationError(msg)


def require_positive(value: int, *, name: str) -> None:
    """Raise ConfigurationError unless *value* is an int >= 1."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        msg = f"{name} must be a positive integer, got {value!r}"
        raise ConfigurationError(msg)


def require_non_negative(value: int, *, name: str) -> None:
    """Raise ConfigurationError unless *value* is an int >= 0."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{name} must be a non-negative integer, got {value!r}"
        raise ConfigurationError(msg)


def parse_choice(choice: type[E], value: str, *, name: str) -> E:
    """Return the *choice* member whose value is *value*.

    Raises:
        ConfigurationError: If *value* names no member.

    """
    try:
        return choice(value)
    except ValueError:
        allowed = ", ".join(member.value for member in choice)
        msg = f"Unknown {name} {value!r} (expected one of: {allowed})"
        raise ConfigurationError(msg) from None


def validate_processes(processes: Iterable[Process]) -> tuple[Process, ...]:
    """Check a process set and return it as an immutable snapshot.

    Raises:
        ConfigurationError: On a non-integer id or priority, a negative
            arrival, a burst below 1, or a repeated process id.

    """
    snapshot = tuple(processes)
    seen: set[int] = set()
    for proc in snapshot:
        require_int(proc.id, name="process id")
        require_int(proc.priority, name=f"priority of process {proc.id}")
        require_non_negative(proc.arrival_time, name=f"arrival time of process {proc.id}")
        require_positive(proc.burst_time, name=f"burst time of process {proc.id}")
        if proc.id in seen:
            msg = f"Duplicate process id {proc.id}"
            raise ConfigurationError(msg)
        seen.add(proc.id)
    return snapshot


def validate_requests(requests: Iterable[MemoryRequest]) -> tuple[MemoryRequest, ...]:
    """Check memory request sizes and return an immutable snapshot."""
    snapshot = tuple(requests)
    for req in snapshot:
        require_int(req.id, name="request id")
        require_positive(req.size, name=f"size of request {req.id}")
    return snapshot


def validate_references(references: Iterable[PageId]) -> tuple[PageId, ...]:
    """Check a page reference stream and return an immutable snapshot.

    Page ids are compared for equality and kept in hashed lookups, so
    only plain ints and strings are accepted.

    Raises:
        ConfigurationError: On a reference that is neither an int nor a
            string.

    """
    snapshot = tuple(references)
    for position, page_id in enumerate(snapshot):
        if isinstance(page_id, bool) or not isinstance(page_id, int | str):
            msg = f"reference {position} must be an integer or string page id, got {page_id!r}"
            raise ConfigurationError(msg)
    return snapshot
