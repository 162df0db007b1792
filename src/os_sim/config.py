"""Simulator configuration — defaults and environment overrides.

The engines themselves take every knob as an explicit argument; there
is no global state.  ``SimulatorConfig`` only supplies the *defaults*
an outer surface (the web API) falls back on when a request leaves a
knob out, e.g. the Round Robin quantum or the disk size.

Configuration follows the Unix environment model: a flat block of
``KEY=VALUE`` strings, parsed into typed fields by
``SimulatorConfig.from_environment``.  Anything with a ``get`` method
works as the source, so ``os.environ`` or a plain dict can be passed
straight in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from os_sim.workload import ConfigurationError, require_positive

ENV_PREFIX = "OS_SIM_"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})


class _Source(Protocol):
    def get(self, key: str, default: str | None = None, /) -> str | None: ...


@dataclass(frozen=True)
class SimulatorConfig:
    """Default knobs for simulation requests.

    Attributes:
        quantum: Round Robin time slice used when a request gives none.
        max_cylinders: Disk size used when a request gives none.
        frames_count: Page frame count used when a request gives none.
        total_memory: Address-space size used when a request gives none.
        debug: Keep DEBUG entries in the web app's simulation log.
        log_capacity: Newest simulation log entries the web app keeps.

    """

    quantum: int = 2
    max_cylinders: int = 200
    frames_count: int = 3
    total_memory: int = 100
    debug: bool = False
    log_capacity: int = 1000

    def __post_init__(self) -> None:
        """Reject non-positive defaults."""
        require_positive(self.quantum, name="quantum")
        require_positive(self.max_cylinders, name="max_cylinders")
        require_positive(self.frames_count, name="frames_count")
        require_positive(self.total_memory, name="total_memory")
        require_positive(self.log_capacity, name="log_capacity")

    @classmethod
    def from_environment(cls, env: _Source) -> SimulatorConfig:
        """Build a config from ``OS_SIM_*`` variables, defaulting the rest.

        Raises:
            ConfigurationError: If a variable is present but malformed.

        """
        defaults = cls()
        return cls(
            quantum=_int_var(env, "QUANTUM", defaults.quantum),
            max_cylinders=_int_var(env, "MAX_CYLINDERS", defaults.max_cylinders),
            frames_count=_int_var(env, "FRAMES", defaults.frames_count),
            total_memory=_int_var(env, "TOTAL_MEMORY", defaults.total_memory),
            debug=_bool_var(env, "DEBUG", defaults.debug),
            log_capacity=_int_var(env, "LOG_CAPACITY", defaults.log_capacity),
        )


def _int_var(env: _Source, name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        msg = f"{ENV_PREFIX}{name} must be an integer, got {raw!r}"
        raise ConfigurationError(msg) from None


def _bool_var(env: _Source, name: str, default: bool) -> bool:  # noqa: FBT001
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    msg = f"{ENV_PREFIX}{name} must be a boolean flag, got {raw!r}"
    raise ConfigurationError(msg)
