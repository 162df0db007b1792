"""I/O subsystem — disk head scheduling.

Re-exports public symbols so callers can write::

    from os_sim.io import DiskAlgorithm, run_disk_schedule
"""

from os_sim.io.disk import (
    DEFAULT_MAX_CYLINDERS,
    CSCANPolicy,
    DiskAlgorithm,
    DiskPolicy,
    DiskResult,
    DiskScheduler,
    FCFSPolicy,
    SCANPolicy,
    parse_cylinders,
    run_disk_schedule,
    seek_distance,
)

__all__ = [
    "DEFAULT_MAX_CYLINDERS",
    "CSCANPolicy",
    "DiskAlgorithm",
    "DiskPolicy",
    "DiskResult",
    "DiskScheduler",
    "FCFSPolicy",
    "SCANPolicy",
    "parse_cylinders",
    "run_disk_schedule",
    "seek_distance",
]
