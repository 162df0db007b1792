"""Process subsystem — CPU scheduling.

Re-exports public symbols so callers can write::

    from os_sim.process import CpuAlgorithm, run_cpu_schedule
"""

from os_sim.process.scheduler import (
    CpuAlgorithm,
    ScheduleResult,
    SelectionPolicy,
    Task,
    compare_algorithms,
    run_cpu_schedule,
)

__all__ = [
    "CpuAlgorithm",
    "ScheduleResult",
    "SelectionPolicy",
    "Task",
    "compare_algorithms",
    "run_cpu_schedule",
]
