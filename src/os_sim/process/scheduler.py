"""CPU scheduler — turns a process set into a timeline and metrics.

Six algorithms are supported:

- **FCFS** (First Come, First Served): arrival order, ties by id.
- **SJF** (Shortest Job First): non-preemptive, shortest burst wins,
  ties by earliest arrival.
- **SRTF** (Shortest Remaining Time First): SJF re-decided every tick.
- **RR** (Round Robin): FIFO ready queue with a fixed time quantum.
- **Priority**: non-preemptive, lowest priority value wins, ties by
  earliest arrival.
- **P-Priority**: Priority re-decided every tick.

Design: Strategy pattern
    Every algorithm except Round Robin is the same loop ("among the
    processes that have arrived and are unfinished, pick the best one,
    run it"), differing only in what *best* means and in whether the
    choice is revisited every tick.  ``SelectionPolicy`` captures those
    two knobs (a sort key and a preemption flag) and ``_run_selection``
    is the one loop that drives them.  Round Robin needs a real queue
    rather than a choice, so it gets its own loop.

Tie-breaking:
    The selection scan goes left to right over the processes in the
    order the caller listed them, and a candidate only replaces the
    current best when its key is *strictly* smaller.  So when keys tie
    completely, the first process in input order wins.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from os_sim.logging import Logger
from os_sim.workload import (
    IDLE,
    ConfigurationError,
    ExecutionBlock,
    Process,
    ProcessMetrics,
    parse_choice,
    require_positive,
    validate_processes,
)

_SOURCE = "cpu"


class CpuAlgorithm(StrEnum):
    """CPU scheduling algorithms, valued by their display names."""

    FCFS = "FCFS"
    SJF = "SJF"
    SRTF = "SRTF"
    RR = "RR"
    PRIORITY = "Priority"
    PREEMPTIVE_PRIORITY = "P-Priority"


@dataclass(eq=False)
class Task:
    """The scheduler's private, mutable copy of a process.

    ``eq=False`` keeps identity semantics, so two tasks built from equal
    processes are still distinct entries in the pending list.
    """

    process: Process
    remaining: int

    @classmethod
    def from_process(cls, process: Process) -> Task:
        """Create a task with the full burst still to run."""
        return cls(process=process, remaining=process.burst_time)


@dataclass(frozen=True)
class SelectionPolicy:
    """How to pick the next task among those ready to run.

    Attributes:
        key: Smaller key = better candidate.
        preemptive: Revisit the choice every tick instead of running
            the chosen task to completion.

    """

    key: Callable[[Task], tuple[int, ...]]
    preemptive: bool = False

    def select(self, ready: Sequence[Task]) -> Task:
        """Return the best task, first in scan order on a full tie."""
        best = ready[0]
        best_key = self.key(best)
        for task in ready[1:]:
            task_key = self.key(task)
            if task_key < best_key:
                best, best_key = task, task_key
        return best


FCFS_POLICY = SelectionPolicy(key=lambda t: (t.process.arrival_time, t.process.id))
SJF_POLICY = SelectionPolicy(key=lambda t: (t.process.burst_time, t.process.arrival_time))
SRTF_POLICY = SelectionPolicy(key=lambda t: (t.remaining,), preemptive=True)
PRIORITY_POLICY = SelectionPolicy(key=lambda t: (t.process.priority, t.process.arrival_time))
PREEMPTIVE_PRIORITY_POLICY = SelectionPolicy(
    key=lambda t: (t.process.priority, t.process.arrival_time),
    preemptive=True,
)

_POLICIES: dict[CpuAlgorithm, SelectionPolicy] = {
    CpuAlgorithm.FCFS: FCFS_POLICY,
    CpuAlgorithm.SJF: SJF_POLICY,
    CpuAlgorithm.SRTF: SRTF_POLICY,
    CpuAlgorithm.PRIORITY: PRIORITY_POLICY,
    CpuAlgorithm.PREEMPTIVE_PRIORITY: PREEMPTIVE_PRIORITY_POLICY,
}


@dataclass(frozen=True)
class ScheduleResult:
    """Everything one scheduling run produced.

    Attributes:
        algorithm: The algorithm that was simulated.
        timeline: Ordered, coalesced execution blocks (IDLE included).
        metrics: Process id → metrics, one entry per input process.
        avg_waiting: Mean waiting time over all processes (0 if none).
        avg_turnaround: Mean turnaround time over all processes (0 if none).
        total_time: Tick at which the last process completed.

    """

    algorithm: CpuAlgorithm
    timeline: tuple[ExecutionBlock, ...] = ()
    metrics: Mapping[int, ProcessMetrics] = field(default_factory=dict)
    avg_waiting: float = 0.0
    avg_turnaround: float = 0.0
    total_time: int = 0


class _Recorder:
    """Collect timeline blocks and completion metrics during one run."""

    def __init__(self) -> None:
        self.blocks: list[ExecutionBlock] = []
        self.metrics: dict[int, ProcessMetrics] = {}

    def run(self, process_id: int | str, start: int, end: int) -> None:
        """Record *process_id* owning ``[start, end)``, merging with the last block."""
        if self.blocks:
            last = self.blocks[-1]
            if last.process_id == process_id and last.end_time == start:
                self.blocks[-1] = ExecutionBlock(process_id, last.start_time, end)
                return
        self.blocks.append(ExecutionBlock(process_id, start, end))

    def idle(self, start: int, end: int) -> None:
        """Record the CPU sitting idle over ``[start, end)``."""
        self.run(IDLE, start, end)

    def complete(self, task: Task, clock: int) -> None:
        """Record *task*'s metrics at the instant it finished."""
        self.metrics[task.process.id] = ProcessMetrics.at_completion(task.process, clock)


def _run_selection(tasks: list[Task], policy: SelectionPolicy, recorder: _Recorder) -> int:
    """Drive a selection policy until every task completes; return the final tick."""
    clock = 0
    pending = list(tasks)
    while pending:
        ready = [t for t in pending if t.process.arrival_time <= clock]
        if not ready:
            next_arrival = min(t.process.arrival_time for t in pending)
            recorder.idle(clock, next_arrival)
            clock = next_arrival
            continue
        task = policy.select(ready)
        ticks = 1 if policy.preemptive else task.remaining
        recorder.run(task.process.id, clock, clock + ticks)
        clock += ticks
        task.remaining -= ticks
        if task.remaining == 0:
            recorder.complete(task, clock)
            pending.remove(task)
    return clock


def _run_round_robin(tasks: list[Task], quantum: int, recorder: _Recorder) -> int:
    """Round Robin over a FIFO ready queue; return the final tick.

    Processes that arrive by the end of a slice join the queue *before*
    the preempted process is put back, so they run ahead of it.
    """
    arrivals = deque(sorted(tasks, key=lambda t: (t.process.arrival_time, t.process.id)))
    ready: deque[Task] = deque()
    clock = 0

    def admit() -> None:
        while arrivals and arrivals[0].process.arrival_time <= clock:
            ready.append(arrivals.popleft())

    admit()
    while ready or arrivals:
        if not ready:
            next_arrival = arrivals[0].process.arrival_time
            recorder.idle(clock, next_arrival)
            clock = next_arrival
            admit()
        task = ready.popleft()
        ticks = min(task.remaining, quantum)
        recorder.run(task.process.id, clock, clock + ticks)
        clock += ticks
        task.remaining -= ticks
        admit()
        if task.remaining > 0:
            ready.append(task)
        else:
            recorder.complete(task, clock)
    return clock


def run_cpu_schedule(
    processes: Iterable[Process],
    algorithm: CpuAlgorithm | str,
    *,
    quantum: int | None = None,
    logger: Logger | None = None,
) -> ScheduleResult:
    """Simulate *algorithm* over *processes* and return the full result.

    Args:
        processes: The workload; ids must be unique.
        algorithm: Which scheduling algorithm to simulate.
        quantum: Time slice, required (and only used) for Round Robin.
        logger: Optional log to narrate the run into.

    Returns:
        The timeline, per-process metrics, and averages.  An empty
        workload yields an empty, all-zero result.

    Raises:
        ConfigurationError: On an invalid workload, an unknown
            algorithm, or a missing/non-positive Round Robin quantum.

    """
    algorithm = parse_choice(CpuAlgorithm, algorithm, name="CPU algorithm")
    snapshot = validate_processes(processes)
    slice_ticks = 0
    if algorithm is CpuAlgorithm.RR:
        if quantum is None:
            msg = "Round Robin needs a time quantum"
            raise ConfigurationError(msg)
        require_positive(quantum, name="quantum")
        slice_ticks = quantum

    if not snapshot:
        return ScheduleResult(algorithm=algorithm)

    tasks = [Task.from_process(p) for p in snapshot]
    recorder = _Recorder()
    if algorithm is CpuAlgorithm.RR:
        total_time = _run_round_robin(tasks, slice_ticks, recorder)
    else:
        total_time = _run_selection(tasks, _POLICIES[algorithm], recorder)

    count = len(recorder.metrics)
    result = ScheduleResult(
        algorithm=algorithm,
        timeline=tuple(recorder.blocks),
        metrics=recorder.metrics,
        avg_waiting=sum(m.waiting_time for m in recorder.metrics.values()) / count,
        avg_turnaround=sum(m.turnaround_time for m in recorder.metrics.values()) / count,
        total_time=total_time,
    )
    if logger is not None:
        for block in result.timeline:
            logger.debug(str(block), source=_SOURCE)
        logger.info(
            f"{algorithm}: {count} processes finished at t={total_time}, "
            f"avg wait {result.avg_waiting:.2f}, avg turnaround {result.avg_turnaround:.2f}",
            source=_SOURCE,
        )
    return result


def compare_algorithms(
    processes: Iterable[Process],
    *,
    quantum: int,
    logger: Logger | None = None,
) -> dict[CpuAlgorithm, ScheduleResult]:
    """Run every algorithm on the same workload, keyed by algorithm."""
    snapshot = tuple(processes)
    return {
        algorithm: run_cpu_schedule(snapshot, algorithm, quantum=quantum, logger=logger)
        for algorithm in CpuAlgorithm
    }
