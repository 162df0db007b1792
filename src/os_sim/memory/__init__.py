"""Memory subsystem — contiguous allocation and page replacement.

Re-exports public symbols so callers can write::

    from os_sim.memory import FitStrategy, run_memory_allocation
"""

from os_sim.memory.allocator import (
    INSUFFICIENT_SPACE,
    AllocationLogEntry,
    AllocationResult,
    AllocationStatus,
    BestFitPolicy,
    ContiguousAllocator,
    FirstFitPolicy,
    FitPolicy,
    FitStrategy,
    WorstFitPolicy,
    run_memory_allocation,
)
from os_sim.memory.paging import (
    FIFOPolicy,
    FrameTable,
    LRUPolicy,
    OptimalPolicy,
    PagingResult,
    ReplacementAlgorithm,
    ReplacementPolicy,
    compare_policies,
    parse_reference_string,
    run_page_replacement,
)

__all__ = [
    "INSUFFICIENT_SPACE",
    "AllocationLogEntry",
    "AllocationResult",
    "AllocationStatus",
    "BestFitPolicy",
    "ContiguousAllocator",
    "FIFOPolicy",
    "FirstFitPolicy",
    "FitPolicy",
    "FitStrategy",
    "FrameTable",
    "LRUPolicy",
    "OptimalPolicy",
    "PagingResult",
    "ReplacementAlgorithm",
    "ReplacementPolicy",
    "WorstFitPolicy",
    "compare_policies",
    "parse_reference_string",
    "run_memory_allocation",
    "run_page_replacement",
]
