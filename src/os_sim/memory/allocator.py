"""Contiguous memory allocation — first, best, and worst fit.

Unlike paging, contiguous allocation hands every request one unbroken
range of addresses.  The address space ``[0, total_memory)`` is kept as
an ordered list of blocks, each either free or owned by a request.  A
request is satisfied by carving it out of the front of a free block;
whatever is left over becomes a new free block right behind it.

Fit strategies decide *which* free block to carve from:

- **First fit** — the first free block that is big enough.  Fast.
- **Best fit** — the smallest free block that is big enough.  Leaves
  the tightest leftovers, which tend to become unusable slivers.
- **Worst fit** — the largest free block.  Leaves the biggest leftover,
  hoping it stays useful.

Ties in best/worst fit go to the block found first in address order.

Invariant:
    The blocks always partition the address space: sorted by start,
    each starting where the previous one ends, sizes summing to the
    total.  Nothing is ever freed in a simulation run, so adjacent free
    blocks cannot appear and no coalescing step is needed.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from os_sim.logging import Logger
from os_sim.workload import (
    MemoryBlock,
    MemoryRequest,
    parse_choice,
    require_positive,
    validate_requests,
)

_SOURCE = "memory"

INSUFFICIENT_SPACE = "insufficient contiguous space"


class FitStrategy(StrEnum):
    """Which free block a request is carved from."""

    FIRST = "first"
    BEST = "best"
    WORST = "worst"


class AllocationStatus(StrEnum):
    """Outcome of a single request."""

    OK = "OK"
    FAIL = "FAIL"


class FitPolicy(Protocol):
    """Protocol for fit strategies (Strategy pattern)."""

    def choose(self, blocks: Sequence[MemoryBlock], size: int) -> int | None:
        """Return the index of the block to carve from, or None if none fits."""
        ...


class FirstFitPolicy:
    """Take the first free block that is large enough."""

    def choose(self, blocks: Sequence[MemoryBlock], size: int) -> int | None:
        """Scan in address order and stop at the first fit."""
        return next(
            (i for i, b in enumerate(blocks) if not b.allocated and b.size >= size),
            None,
        )


class BestFitPolicy:
    """Take the smallest free block that is large enough."""

    def choose(self, blocks: Sequence[MemoryBlock], size: int) -> int | None:
        """Return the tightest fit, first one found on a tie."""
        best: int | None = None
        for i, block in enumerate(blocks):
            if block.allocated or block.size < size:
                continue
            if best is None or block.size < blocks[best].size:
                best = i
        return best


class WorstFitPolicy:
    """Take the largest free block, provided it is large enough."""

    def choose(self, blocks: Sequence[MemoryBlock], size: int) -> int | None:
        """Return the loosest fit, first one found on a tie."""
        worst: int | None = None
        for i, block in enumerate(blocks):
            if block.allocated or block.size < size:
                continue
            if worst is None or block.size > blocks[worst].size:
                worst = i
        return worst


_POLICIES: dict[FitStrategy, FitPolicy] = {
    FitStrategy.FIRST: FirstFitPolicy(),
    FitStrategy.BEST: BestFitPolicy(),
    FitStrategy.WORST: WorstFitPolicy(),
}


@dataclass(frozen=True)
class AllocationLogEntry:
    """What happened to one request.

    Attributes:
        request_id: The request this entry describes.
        size: The size that was asked for.
        status: OK if a block was carved out, FAIL otherwise.
        detail: The fit used (OK) or the failure reason (FAIL).
        block: The allocated block, or None on failure.

    """

    request_id: int
    size: int
    status: AllocationStatus
    detail: str
    block: MemoryBlock | None = None

    @property
    def ok(self) -> bool:
        """Return True if the request was satisfied."""
        return self.status is AllocationStatus.OK

    def __str__(self) -> str:
        """Format as ``OK: Process 1 assigned via FIRST fit`` and the like."""
        if self.ok:
            return f"OK: Process {self.request_id} assigned via {self.detail}"
        return f"FAIL: Process {self.request_id} ({self.size}u): {self.detail}"


@dataclass(frozen=True)
class AllocationResult:
    """Final partition plus one log entry per request, in request order."""

    strategy: FitStrategy
    blocks: tuple[MemoryBlock, ...]
    log: tuple[AllocationLogEntry, ...]


class ContiguousAllocator:
    """Own a block partition and satisfy requests against it."""

    def __init__(self, *, total_memory: int, policy: FitPolicy) -> None:
        """Create an allocator whose whole address space is one free block.

        Args:
            total_memory: Size of the address space.
            policy: The fit strategy used to choose blocks.

        """
        require_positive(total_memory, name="total_memory")
        self._total_memory = total_memory
        self._policy = policy
        self._blocks: list[MemoryBlock] = [MemoryBlock(start=0, size=total_memory)]

    @property
    def total_memory(self) -> int:
        """Return the size of the address space."""
        return self._total_memory

    @property
    def blocks(self) -> tuple[MemoryBlock, ...]:
        """Return the current partition in address order."""
        return tuple(self._blocks)

    @property
    def free_memory(self) -> int:
        """Return the total size of all free blocks."""
        return sum(b.size for b in self._blocks if not b.allocated)

    def allocate(self, request: MemoryRequest) -> MemoryBlock | None:
        """Carve *request* out of a free block.

        Returns:
            The allocated block, or None if no free block is big enough
            (the partition is then left untouched).

        """
        index = self._policy.choose(self._blocks, request.size)
        if index is None:
            return None
        target = self._blocks[index]
        allocated = MemoryBlock(
            start=target.start,
            size=request.size,
            allocated=True,
            owner_id=request.id,
        )
        replacement = [allocated]
        leftover = target.size - request.size
        if leftover > 0:
            replacement.append(MemoryBlock(start=allocated.end, size=leftover))
        self._blocks[index : index + 1] = replacement
        return allocated


def run_memory_allocation(
    total_memory: int,
    requests: Iterable[MemoryRequest],
    strategy: FitStrategy | str,
    *,
    logger: Logger | None = None,
) -> AllocationResult:
    """Place every request in order under *strategy*.

    Unsatisfiable requests are logged as FAIL and skipped; they are not
    errors.

    Raises:
        ConfigurationError: On a non-positive total, a non-positive
            request size, or an unknown strategy.

    """
    strategy = parse_choice(FitStrategy, strategy, name="fit strategy")
    snapshot = validate_requests(requests)
    allocator = ContiguousAllocator(total_memory=total_memory, policy=_POLICIES[strategy])

    log: list[AllocationLogEntry] = []
    for request in snapshot:
        block = allocator.allocate(request)
        if block is None:
            entry = AllocationLogEntry(
                request_id=request.id,
                size=request.size,
                status=AllocationStatus.FAIL,
                detail=INSUFFICIENT_SPACE,
            )
            if logger is not None:
                logger.warning(str(entry), source=_SOURCE)
        else:
            entry = AllocationLogEntry(
                request_id=request.id,
                size=request.size,
                status=AllocationStatus.OK,
                detail=f"{strategy.upper()} fit",
                block=block,
            )
            if logger is not None:
                logger.debug(f"{entry} at {block.start}-{block.end}", source=_SOURCE)
        log.append(entry)

    if logger is not None:
        placed = sum(1 for e in log if e.ok)
        logger.info(
            f"{strategy} fit: placed {placed}/{len(log)} requests, "
            f"{allocator.free_memory}/{total_memory} units free",
            source=_SOURCE,
        )
    return AllocationResult(strategy=strategy, blocks=allocator.blocks, log=tuple(log))
