"""Disk scheduling — the order in which the head visits cylinders.

When several I/O requests are queued, the disk arm must travel between
cylinders to service them.  The dominant cost is **seek distance**:
how far the arm moves in total.  Disk scheduling algorithms choose the
visiting order.

Think of the arm as an elevator:
    - **FCFS** — stop at floors in the order the buttons were pressed.
    - **SCAN** — ride all the way up, then come back down.
    - **C-SCAN** — ride all the way up, drop straight to the ground
      floor, and ride up again.

SCAN and C-SCAN always start by sweeping *up* from the head.  They only
travel to the last cylinder (``max_cylinders - 1``) when some request
lies below the head and a return trip is needed; that boundary stop
and C-SCAN's jump to cylinder 0 appear in the path as explicit
points, and the jump is charged at full distance.

All policies implement the ``DiskPolicy`` protocol (the Strategy
pattern, same as the CPU scheduler and page replacement).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from itertools import pairwise
from typing import Protocol

from os_sim.logging import Logger
from os_sim.workload import ConfigurationError, parse_choice, require_positive

_SOURCE = "disk"

DEFAULT_MAX_CYLINDERS = 200


class DiskAlgorithm(StrEnum):
    """Disk head scheduling algorithms."""

    FCFS = "FCFS"
    SCAN = "SCAN"
    C_SCAN = "C-SCAN"


class DiskPolicy(Protocol):
    """Protocol for disk scheduling policies (Strategy pattern)."""

    def schedule(self, requests: list[int], *, head: int) -> list[int]:
        """Return every point the head stops at after leaving *head*.

        Args:
            requests: Cylinder numbers to visit.
            head: Current position of the disk head.

        Returns:
            Ordered cylinder stops, boundary stops included.

        """
        ...


class FCFSPolicy:
    """First Come, First Served — service in arrival order.

    Fair, but the arm zigzags across the disk and the total seek
    distance is usually the worst of the three.
    """

    def schedule(self, requests: list[int], *, head: int) -> list[int]:  # noqa: ARG002
        """Return requests in their original order."""
        return list(requests)


class SCANPolicy:
    """SCAN (elevator) — sweep up to the end, then reverse.

    Args:
        max_cylinders: Number of cylinders on the disk.

    """

    def __init__(self, *, max_cylinders: int = DEFAULT_MAX_CYLINDERS) -> None:
        """Create a SCAN policy for a disk of *max_cylinders* cylinders."""
        self._max_cylinders = max_cylinders

    def schedule(self, requests: list[int], *, head: int) -> list[int]:
        """Return stops in SCAN order."""
        up = sorted(r for r in requests if r >= head)
        down = sorted((r for r in requests if r < head), reverse=True)
        if not down:
            return up
        return [*up, self._max_cylinders - 1, *down]


class CSCANPolicy:
    """Circular SCAN — sweep up, jump back to 0, sweep up again.

    Only ever services requests while moving up, which gives every
    cylinder the same expected wait; plain SCAN favours the middle.

    Args:
        max_cylinders: Number of cylinders on the disk.

    """

    def __init__(self, *, max_cylinders: int = DEFAULT_MAX_CYLINDERS) -> None:
        """Create a C-SCAN policy for a disk of *max_cylinders* cylinders."""
        self._max_cylinders = max_cylinders

    def schedule(self, requests: list[int], *, head: int) -> list[int]:
        """Return stops in C-SCAN order."""
        up = sorted(r for r in requests if r >= head)
        wrapped = sorted(r for r in requests if r < head)
        if not wrapped:
            return up
        return [*up, self._max_cylinders - 1, 0, *wrapped]


@dataclass(frozen=True)
class DiskResult:
    """The head's path (starting at its initial position) and total distance."""

    algorithm: DiskAlgorithm
    path: tuple[int, ...]
    seek_cost: int

    @property
    def average_seek(self) -> float:
        """Return seek cost per head movement (0.0 if the head never moved)."""
        moves = len(self.path) - 1
        return self.seek_cost / moves if moves else 0.0


def seek_distance(path: Iterable[int]) -> int:
    """Return the sum of absolute differences between consecutive points."""
    return sum(abs(b - a) for a, b in pairwise(path))


class DiskScheduler:
    """Disk scheduler — ties a policy to a request queue and a head."""

    def __init__(self, *, policy: DiskPolicy, head: int = 0) -> None:
        """Create a disk scheduler with a policy and initial head position."""
        self._policy = policy
        self._head = head
        self._queue: list[int] = []

    @property
    def head(self) -> int:
        """Return current head position."""
        return self._head

    @property
    def pending(self) -> list[int]:
        """Return the current request queue."""
        return list(self._queue)

    def add_request(self, cylinder: int) -> None:
        """Queue an I/O request for a cylinder."""
        self._queue.append(cylinder)

    def run(self) -> list[int]:
        """Service every queued request and return the full head path.

        The path starts at the current head position.  Afterwards the
        head rests on the last stop and the queue is empty.
        """
        path = [self._head, *self._policy.schedule(self._queue, head=self._head)]
        self._head = path[-1]
        self._queue.clear()
        return path


def _make_policy(algorithm: DiskAlgorithm, max_cylinders: int) -> DiskPolicy:
    if algorithm is DiskAlgorithm.SCAN:
        return SCANPolicy(max_cylinders=max_cylinders)
    if algorithm is DiskAlgorithm.C_SCAN:
        return CSCANPolicy(max_cylinders=max_cylinders)
    return FCFSPolicy()


def _check_cylinder(value: int, *, max_cylinders: int, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < max_cylinders:
        msg = f"{name} must be a cylinder in [0, {max_cylinders}), got {value!r}"
        raise ConfigurationError(msg)


def run_disk_schedule(
    head: int,
    requests: Iterable[int],
    max_cylinders: int = DEFAULT_MAX_CYLINDERS,
    algorithm: DiskAlgorithm | str = DiskAlgorithm.FCFS,
    *,
    logger: Logger | None = None,
) -> DiskResult:
    """Move the head from *head* through every request under *algorithm*.

    Raises:
        ConfigurationError: If the disk size is not positive, the head or
            a request lies outside ``[0, max_cylinders)``, or the
            algorithm is unknown.

    """
    algorithm = parse_choice(DiskAlgorithm, algorithm, name="disk algorithm")
    require_positive(max_cylinders, name="max_cylinders")
    _check_cylinder(head, max_cylinders=max_cylinders, name="head position")
    snapshot = tuple(requests)
    for cylinder in snapshot:
        _check_cylinder(cylinder, max_cylinders=max_cylinders, name="requested cylinder")

    scheduler = DiskScheduler(policy=_make_policy(algorithm, max_cylinders), head=head)
    for cylinder in snapshot:
        scheduler.add_request(cylinder)
    path = tuple(scheduler.run())
    result = DiskResult(algorithm=algorithm, path=path, seek_cost=seek_distance(path))

    if logger is not None:
        logger.debug(" -> ".join(str(c) for c in path), source=_SOURCE)
        logger.info(
            f"{algorithm}: {len(snapshot)} requests from cylinder {head}, "
            f"seek cost {result.seek_cost}",
            source=_SOURCE,
        )
    return result


def parse_cylinders(text: str) -> list[int]:
    """Parse ``"82, 170, x, 43"`` into ``[82, 170, 43]``, skipping non-integers."""
    cylinders: list[int] = []
    for item in text.split(","):
        try:
            cylinders.append(int(item.strip()))
        except ValueError:
            continue
    return cylinders
