"""Page replacement — which resident page to evict on a fault.

A process has a fixed number of physical frames.  It references pages
one after another; a reference to a page that is already in a frame is
a **hit**, anything else is a **page fault**.  On a fault the page is
loaded into the first empty frame, or, when every frame is occupied,
into the frame of a **victim** chosen by the replacement policy.

Replacement Policies (Strategy pattern, like the CPU scheduler):
    - **FIFO** — evict the page that was loaded earliest.  Simple, but
      suffers from Belady's anomaly (more frames can mean more faults).
    - **LRU** — evict the page referenced longest ago.  Implemented with
      an OrderedDict for O(1) move-to-end on every reference.
    - **Optimal** — evict the page whose next use lies farthest in the
      future (a page never used again goes first).  Needs the whole
      reference string up front, so it is a yardstick, not something a
      real kernel can run.

The engine reports the *physical* slot contents after every reference.
LRU reorders its recency bookkeeping on a hit, but the page stays in
the same frame.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from os_sim.logging import Logger
from os_sim.workload import HistoryStep, PageId, parse_choice, require_positive, validate_references

_SOURCE = "paging"


class ReplacementAlgorithm(StrEnum):
    """Page replacement policies."""

    FIFO = "FIFO"
    LRU = "LRU"
    OPTIMAL = "Optimal"


# ---------------------------------------------------------------------------
# Replacement Policy Protocol (Strategy pattern)
# ---------------------------------------------------------------------------


class ReplacementPolicy(Protocol):
    """Interface for page replacement algorithms."""

    def add_page(self, page_id: PageId) -> None:
        """Record that a page was loaded into a frame."""
        ...

    def remove_page(self, page_id: PageId) -> None:
        """Record that a page was evicted."""
        ...

    def record_access(self, page_id: PageId) -> None:
        """Record a hit on a resident page."""
        ...

    def select_victim(self, frames: Sequence[PageId | None], *, position: int) -> PageId:
        """Choose which resident page to evict.

        Args:
            frames: Current slot contents (all occupied).
            position: Index of the faulting reference in the stream.

        Returns:
            The page id of the victim.

        """
        ...


# ---------------------------------------------------------------------------
# FIFO Policy
# ---------------------------------------------------------------------------


class FIFOPolicy:
    """First In, First Out — evict the oldest loaded page."""

    def __init__(self) -> None:
        """Create an empty FIFO policy."""
        self._queue: list[PageId] = []

    def add_page(self, page_id: PageId) -> None:
        """Append the page to the back of the load queue."""
        self._queue.append(page_id)

    def remove_page(self, page_id: PageId) -> None:
        """Remove a page from the queue."""
        self._queue.remove(page_id)

    def record_access(self, page_id: PageId) -> None:
        """FIFO ignores hits; order is purely by load time."""

    def select_victim(self, frames: Sequence[PageId | None], *, position: int) -> PageId:  # noqa: ARG002
        """Return the oldest page (front of the queue).

        Raises:
            IndexError: If no pages are tracked.

        """
        if not self._queue:
            msg = "No pages to evict"
            raise IndexError(msg)
        return self._queue[0]


# ---------------------------------------------------------------------------
# LRU Policy
# ---------------------------------------------------------------------------


class LRUPolicy:
    """Least Recently Used — evict the page referenced longest ago.

    The first key of the OrderedDict is always the least recently used.
    """

    def __init__(self) -> None:
        """Create an empty LRU policy."""
        self._order: OrderedDict[PageId, None] = OrderedDict()

    def add_page(self, page_id: PageId) -> None:
        """Record a load as the most recent use."""
        self._order[page_id] = None
        self._order.move_to_end(page_id)

    def remove_page(self, page_id: PageId) -> None:
        """Remove a page from recency tracking."""
        self._order.pop(page_id, None)

    def record_access(self, page_id: PageId) -> None:
        """Move the page to the most recently used position."""
        if page_id in self._order:
            self._order.move_to_end(page_id)

    def select_victim(self, frames: Sequence[PageId | None], *, position: int) -> PageId:  # noqa: ARG002
        """Return the least recently used page.

        Raises:
            IndexError: If no pages are tracked.

        """
        if not self._order:
            msg = "No pages to evict"
            raise IndexError(msg)
        return next(iter(self._order))


# ---------------------------------------------------------------------------
# Optimal Policy
# ---------------------------------------------------------------------------


class OptimalPolicy:
    """Belady's optimal algorithm — evict the page needed farthest ahead.

    Frames are scanned in slot order.  The first page with no future
    reference is evicted at once; otherwise the page with the strictly
    farthest next reference wins, so ties go to the lower slot.
    """

    def __init__(self, references: Sequence[PageId]) -> None:
        """Create an optimal policy that can see the whole reference string."""
        self._references = tuple(references)

    def add_page(self, page_id: PageId) -> None:
        """Optimal keeps no load history."""

    def remove_page(self, page_id: PageId) -> None:
        """Optimal keeps no load history."""

    def record_access(self, page_id: PageId) -> None:
        """Optimal keeps no recency history."""

    def next_use(self, page_id: PageId, *, after: int) -> int | None:
        """Return the index of the next reference to *page_id* after *after*."""
        try:
            return self._references.index(page_id, after + 1)
        except ValueError:
            return None

    def select_victim(self, frames: Sequence[PageId | None], *, position: int) -> PageId:
        """Return the resident page whose next use is farthest away.

        Raises:
            IndexError: If no frame holds a page.

        """
        victim: PageId | None = None
        farthest = -1
        for page in frames:
            if page is None:
                continue
            upcoming = self.next_use(page, after=position)
            if upcoming is None:
                return page
            if upcoming > farthest:
                farthest = upcoming
                victim = page
        if victim is None:
            msg = "No pages to evict"
            raise IndexError(msg)
        return victim


# ---------------------------------------------------------------------------
# Frame table
# ---------------------------------------------------------------------------


class FrameTable:
    """Fixed set of physical frames driven by a replacement policy."""

    def __init__(self, *, frames_count: int, policy: ReplacementPolicy) -> None:
        """Create ``frames_count`` empty frames.

        Args:
            frames_count: Number of physical frames (>= 1).
            policy: The algorithm that picks eviction victims.

        """
        require_positive(frames_count, name="frames_count")
        self._frames: list[PageId | None] = [None] * frames_count
        self._policy = policy
        self._faults = 0

    @property
    def frames(self) -> tuple[PageId | None, ...]:
        """Return a snapshot of every slot, empty ones as None."""
        return tuple(self._frames)

    @property
    def fault_count(self) -> int:
        """Return the number of faults so far."""
        return self._faults

    def reference(self, page_id: PageId, *, position: int) -> tuple[bool, PageId | None]:
        """Service one reference.

        Returns:
            ``(is_fault, victim)``; the victim is None on a hit or when
            an empty frame absorbed the fault.

        """
        if page_id in self._frames:
            self._policy.record_access(page_id)
            return False, None

        self._faults += 1
        victim: PageId | None = None
        if None in self._frames:
            slot = self._frames.index(None)
        else:
            victim = self._policy.select_victim(self._frames, position=position)
            slot = self._frames.index(victim)
            self._policy.remove_page(victim)
        self._frames[slot] = page_id
        self._policy.add_page(page_id)
        return True, victim


@dataclass(frozen=True)
class PagingResult:
    """One history step per reference plus the total fault count."""

    algorithm: ReplacementAlgorithm
    history: tuple[HistoryStep, ...]
    fault_count: int

    @property
    def hit_count(self) -> int:
        """Return the number of references that were hits."""
        return len(self.history) - self.fault_count

    @property
    def hit_ratio(self) -> float:
        """Return hits / references (0.0 for an empty stream)."""
        if not self.history:
            return 0.0
        return self.hit_count / len(self.history)


def _make_policy(algorithm: ReplacementAlgorithm, references: Sequence[PageId]) -> ReplacementPolicy:
    if algorithm is ReplacementAlgorithm.FIFO:
        return FIFOPolicy()
    if algorithm is ReplacementAlgorithm.LRU:
        return LRUPolicy()
    return OptimalPolicy(references)


def run_page_replacement(
    frames_count: int,
    references: Iterable[PageId],
    policy: ReplacementAlgorithm | str,
    *,
    logger: Logger | None = None,
) -> PagingResult:
    """Replay *references* against ``frames_count`` frames under *policy*.

    Raises:
        ConfigurationError: On a non-positive frame count, a page id that
            is neither an int nor a string, or an unknown policy.

    """
    algorithm = parse_choice(ReplacementAlgorithm, policy, name="replacement policy")
    stream = validate_references(references)
    table = FrameTable(frames_count=frames_count, policy=_make_policy(algorithm, stream))

    history: list[HistoryStep] = []
    for position, page_id in enumerate(stream):
        is_fault, victim = table.reference(page_id, position=position)
        history.append(HistoryStep(frames=table.frames, is_fault=is_fault))
        if logger is not None and is_fault:
            evicted = f", evicted {victim}" if victim is not None else ""
            logger.debug(f"ref {page_id}: fault{evicted}", source=_SOURCE)

    if logger is not None:
        logger.info(
            f"{algorithm}: {table.fault_count} faults in {len(stream)} references "
            f"with {frames_count} frames",
            source=_SOURCE,
        )
    return PagingResult(algorithm=algorithm, history=tuple(history), fault_count=table.fault_count)


def compare_policies(
    frames_count: int,
    references: Iterable[PageId],
    *,
    logger: Logger | None = None,
) -> dict[ReplacementAlgorithm, PagingResult]:
    """Run every replacement algorithm on the same stream."""
    stream = tuple(references)
    return {
        algorithm: run_page_replacement(frames_count, stream, algorithm, logger=logger)
        for algorithm in ReplacementAlgorithm
    }


def parse_reference_string(text: str) -> list[str]:
    """Split ``"1, 2, 3"`` into ``["1", "2", "3"]``, dropping empty entries."""
    return [item.strip() for item in text.split(",") if item.strip()]
