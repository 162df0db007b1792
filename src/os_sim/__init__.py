"""OS-Sim: step-by-step simulators for classic OS resource management.

Four deterministic engines, each a pure function from a workload to a
complete result:

- ``run_cpu_schedule`` — FCFS, SJF, SRTF, RR, Priority, P-Priority.
- ``run_memory_allocation`` — first, best, and worst fit.
- ``run_page_replacement`` — FIFO, LRU, and Optimal.
- ``run_disk_schedule`` — FCFS, SCAN, and C-SCAN.

Plus single-level and two-level directory models in ``os_sim.fs`` and
an optional Flask JSON API in ``os_sim.web``.
"""

from os_sim.io.disk import DiskAlgorithm, DiskResult, run_disk_schedule
from os_sim.logging import Logger, LogLevel
from os_sim.memory.allocator import AllocationResult, FitStrategy, run_memory_allocation
from os_sim.memory.paging import PagingResult, ReplacementAlgorithm, run_page_replacement
from os_sim.process.scheduler import CpuAlgorithm, ScheduleResult, run_cpu_schedule
from os_sim.workload import (
    IDLE,
    ConfigurationError,
    ExecutionBlock,
    HistoryStep,
    MemoryBlock,
    MemoryRequest,
    Process,
    ProcessMetrics,
)

__all__ = [
    "IDLE",
    "AllocationResult",
    "ConfigurationError",
    "CpuAlgorithm",
    "DiskAlgorithm",
    "DiskResult",
    "ExecutionBlock",
    "FitStrategy",
    "HistoryStep",
    "LogLevel",
    "Logger",
    "MemoryBlock",
    "MemoryRequest",
    "PagingResult",
    "Process",
    "ProcessMetrics",
    "ReplacementAlgorithm",
    "ScheduleResult",
    "run_cpu_schedule",
    "run_disk_schedule",
    "run_memory_allocation",
    "run_page_replacement",
]
