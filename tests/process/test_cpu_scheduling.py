"""Tests for the CPU scheduling engine.

Six algorithms share one result shape: a coalesced timeline, metrics
per process, and average waiting/turnaround times.  Most tests use the
classroom workload below.

- FCFS, SJF, Priority: non-preemptive selection.
- SRTF, P-Priority: selection re-decided every tick.
- RR: FIFO ready queue with a time quantum.
"""

import pytest

from os_sim.process.scheduler import (
    CpuAlgorithm,
    SelectionPolicy,
    Task,
    compare_algorithms,
    run_cpu_schedule,
)
from os_sim.workload import IDLE, ConfigurationError, Process, ProcessMetrics

DEFAULT_QUANTUM = 2

# Classroom workload: (id, arrival, burst, priority)
_WORKLOAD = [
    Process(id=1, arrival_time=0, burst_time=5, priority=2),
    Process(id=2, arrival_time=1, burst_time=3, priority=1),
    Process(id=3, arrival_time=2, burst_time=8, priority=3),
    Process(id=4, arrival_time=3, burst_time=6, priority=4),
]
_TOTAL_TIME = 22  # sum of bursts, no idle gaps


def _blocks(algorithm: str, processes: list[Process], **kwargs: int) -> list[str]:
    """Run *algorithm* and return its timeline as ``P1:0-5`` strings."""
    return [str(b) for b in run_cpu_schedule(processes, algorithm, **kwargs).timeline]


def _waits(algorithm: str, processes: list[Process], **kwargs: int) -> dict[int, int]:
    result = run_cpu_schedule(processes, algorithm, **kwargs)
    return {pid: m.waiting_time for pid, m in result.metrics.items()}


# -- FCFS ----------------------------------------------------------------------


class TestFCFS:
    """FCFS runs processes to completion in arrival order."""

    def test_two_process_example(self) -> None:
        """P1(0,5), P2(1,3) ⇒ P1 0-5, P2 5-8, waits 0 and 4."""
        procs = [Process(id=1, arrival_time=0, burst_time=5), Process(id=2, arrival_time=1, burst_time=3)]
        result = run_cpu_schedule(procs, CpuAlgorithm.FCFS)
        assert [str(b) for b in result.timeline] == ["P1:0-5", "P2:5-8"]
        assert result.metrics[1].waiting_time == 0
        assert result.metrics[2] == ProcessMetrics(completion_time=8, turnaround_time=7, waiting_time=4)

    def test_classroom_workload(self) -> None:
        """The full workload runs back to back."""
        result = run_cpu_schedule(_WORKLOAD, "FCFS")
        assert [str(b) for b in result.timeline] == ["P1:0-5", "P2:5-8", "P3:8-16", "P4:16-22"]
        assert result.avg_waiting == pytest.approx(5.75)
        assert result.avg_turnaround == pytest.approx(11.25)
        assert result.total_time == _TOTAL_TIME

    def test_arrival_ties_broken_by_id(self) -> None:
        """Simultaneous arrivals run in ascending id, whatever the input order."""
        procs = [Process(id=9, arrival_time=0, burst_time=1), Process(id=3, arrival_time=0, burst_time=1)]
        assert _blocks("FCFS", procs) == ["P3:0-1", "P9:1-2"]

    def test_idle_before_first_arrival(self) -> None:
        """An IDLE block covers the time before anything arrives."""
        result = run_cpu_schedule([Process(id=1, arrival_time=2, burst_time=3)], "FCFS")
        assert result.timeline[0].process_id == IDLE
        assert [str(b) for b in result.timeline] == ["IDLE:0-2", "P1:2-5"]
        assert result.metrics[1].waiting_time == 0

    def test_idle_gap_between_processes(self) -> None:
        """The clock jumps to the next arrival when the CPU runs dry."""
        procs = [Process(id=1, arrival_time=0, burst_time=2), Process(id=2, arrival_time=5, burst_time=1)]
        assert _blocks("FCFS", procs) == ["P1:0-2", "IDLE:2-5", "P2:5-6"]


# -- SJF -----------------------------------------------------------------------


class TestSJF:
    """SJF picks the shortest burst among arrived processes."""

    def test_classroom_workload(self) -> None:
        """P4 (burst 6) overtakes P3 (burst 8) once P1 and P2 are done."""
        assert _blocks("SJF", _WORKLOAD) == ["P1:0-5", "P2:5-8", "P4:8-14", "P3:14-22"]
        assert _waits("SJF", _WORKLOAD) == {1: 0, 2: 4, 4: 5, 3: 12}

    def test_non_preemptive(self) -> None:
        """A shorter arrival does not interrupt the running process."""
        procs = [Process(id=1, arrival_time=0, burst_time=10), Process(id=2, arrival_time=1, burst_time=1)]
        assert _blocks("SJF", procs) == ["P1:0-10", "P2:10-11"]

    def test_equal_bursts_broken_by_arrival(self) -> None:
        """With equal bursts the earlier arrival wins, even if listed later."""
        procs = [
            Process(id=1, arrival_time=0, burst_time=4),
            Process(id=2, arrival_time=2, burst_time=3),
            Process(id=3, arrival_time=1, burst_time=3),
        ]
        assert _blocks("SJF", procs) == ["P1:0-4", "P3:4-7", "P2:7-10"]


# -- SRTF ----------------------------------------------------------------------


class TestSRTF:
    """SRTF re-picks the shortest remaining time every tick."""

    def test_classroom_workload(self) -> None:
        """P2 preempts P1 at t=1; unit slices coalesce into blocks."""
        assert _blocks("SRTF", _WORKLOAD) == ["P1:0-1", "P2:1-4", "P1:4-8", "P4:8-14", "P3:14-22"]
        assert run_cpu_schedule(_WORKLOAD, "SRTF").avg_waiting == pytest.approx(5.0)

    def test_tie_goes_to_first_in_input_order(self) -> None:
        """On equal remaining time the earlier-listed process keeps winning."""
        procs = [Process(id=1, arrival_time=0, burst_time=3), Process(id=2, arrival_time=1, burst_time=2)]
        assert _blocks("SRTF", procs) == ["P1:0-3", "P2:3-5"]

    def test_tie_follows_input_order_not_incumbent(self) -> None:
        """Listing the newcomer first makes it win the same tie."""
        procs = [Process(id=2, arrival_time=1, burst_time=2), Process(id=1, arrival_time=0, burst_time=3)]
        assert _blocks("SRTF", procs) == ["P1:0-1", "P2:1-3", "P1:3-5"]


# -- Round Robin ----------------------------------------------------------------


class TestRoundRobin:
    """RR cycles a FIFO queue, one quantum at a time."""

    def test_classroom_workload(self) -> None:
        """Quantum 2 over the classroom workload."""
        expected = [
            "P1:0-2", "P2:2-4", "P3:4-6", "P1:6-8", "P4:8-10", "P2:10-11",
            "P3:11-13", "P1:13-14", "P4:14-16", "P3:16-18", "P4:18-20", "P3:20-22",
        ]  # fmt: skip
        assert _blocks("RR", _WORKLOAD, quantum=DEFAULT_QUANTUM) == expected
        assert _waits("RR", _WORKLOAD, quantum=DEFAULT_QUANTUM) == {2: 7, 1: 9, 4: 11, 3: 12}

    def test_arrival_queues_ahead_of_preempted(self) -> None:
        """A process arriving as a slice ends runs before the preempted one."""
        procs = [Process(id=1, arrival_time=0, burst_time=4), Process(id=2, arrival_time=2, burst_time=2)]
        assert _blocks("RR", procs, quantum=DEFAULT_QUANTUM) == ["P1:0-2", "P2:2-4", "P1:4-6"]

    def test_lone_process_slices_coalesce(self) -> None:
        """Back-to-back slices of one process form a single block."""
        assert _blocks("RR", [Process(id=1, arrival_time=0, burst_time=5)], quantum=DEFAULT_QUANTUM) == ["P1:0-5"]

    def test_idle_then_dispatch(self) -> None:
        """An empty queue idles until the next arrival."""
        procs = [Process(id=1, arrival_time=3, burst_time=1)]
        assert _blocks("RR", procs, quantum=DEFAULT_QUANTUM) == ["IDLE:0-3", "P1:3-4"]

    def test_missing_quantum_rejected(self) -> None:
        """Round Robin without a quantum is a configuration error."""
        with pytest.raises(ConfigurationError, match="quantum"):
            run_cpu_schedule(_WORKLOAD, "RR")

    def test_zero_quantum_rejected(self) -> None:
        """A zero quantum is a configuration error."""
        with pytest.raises(ConfigurationError, match="quantum"):
            run_cpu_schedule(_WORKLOAD, "RR", quantum=0)


# -- Priority -----------------------------------------------------------------------


class TestPriority:
    """Lower priority value = more important."""

    def test_non_preemptive(self) -> None:
        """P1 keeps the CPU even though P2 (priority 1) arrives at t=1."""
        assert _blocks("Priority", _WORKLOAD) == ["P1:0-5", "P2:5-8", "P3:8-16", "P4:16-22"]

    def test_preemptive(self) -> None:
        """P2 preempts P1 the tick it arrives."""
        assert _blocks("P-Priority", _WORKLOAD) == ["P1:0-1", "P2:1-4", "P1:4-8", "P3:8-16", "P4:16-22"]

    def test_equal_priority_broken_by_arrival(self) -> None:
        """Equal priorities fall back to earliest arrival."""
        procs = [
            Process(id=1, arrival_time=0, burst_time=3, priority=1),
            Process(id=2, arrival_time=2, burst_time=1, priority=1),
            Process(id=3, arrival_time=1, burst_time=1, priority=1),
        ]
        assert _blocks("Priority", procs) == ["P1:0-3", "P3:3-4", "P2:4-5"]

    def test_preemptive_equal_priority_broken_by_arrival(self) -> None:
        """At a preemption point, equal priorities go to the earlier arrival.

        P1 is listed first but arrives later, so P2 keeps the CPU.
        """
        procs = [
            Process(id=1, arrival_time=1, burst_time=2, priority=1),
            Process(id=2, arrival_time=0, burst_time=3, priority=1),
        ]
        assert _blocks("P-Priority", procs) == ["P2:0-3", "P1:3-5"]

    @pytest.mark.parametrize("algorithm", ["Priority", "P-Priority"])
    def test_non_integer_priority_rejected(self, algorithm: str) -> None:
        """A missing priority is rejected before scheduling starts."""
        procs = [
            Process(id=1, arrival_time=0, burst_time=2, priority=None),  # pyright: ignore[reportArgumentType]
            Process(id=2, arrival_time=0, burst_time=2, priority=1),
        ]
        with pytest.raises(ConfigurationError, match="priority of process 1"):
            run_cpu_schedule(procs, algorithm)


# -- Shared behaviour ------------------------------------------------------------------


class TestAllAlgorithms:
    """Properties every algorithm must satisfy."""

    @pytest.mark.parametrize("algorithm", list(CpuAlgorithm))
    def test_every_process_has_metrics(self, algorithm: CpuAlgorithm) -> None:
        """Each input process appears exactly once in the metrics."""
        result = run_cpu_schedule(_WORKLOAD, algorithm, quantum=DEFAULT_QUANTUM)
        assert sorted(result.metrics) == [1, 2, 3, 4]

    @pytest.mark.parametrize("algorithm", list(CpuAlgorithm))
    def test_no_negative_waits(self, algorithm: CpuAlgorithm) -> None:
        """waiting >= 0 and turnaround >= burst for every process."""
        procs = [*_WORKLOAD, Process(id=5, arrival_time=30, burst_time=2, priority=0)]
        result = run_cpu_schedule(procs, algorithm, quantum=DEFAULT_QUANTUM)
        bursts = {p.id: p.burst_time for p in procs}
        for pid, metrics in result.metrics.items():
            assert metrics.waiting_time >= 0
            assert metrics.turnaround_time >= bursts[pid]

    @pytest.mark.parametrize("algorithm", list(CpuAlgorithm))
    def test_timeline_is_contiguous_and_coalesced(self, algorithm: CpuAlgorithm) -> None:
        """Blocks tile [0, total_time) and never repeat a process back to back."""
        result = run_cpu_schedule(_WORKLOAD, algorithm, quantum=DEFAULT_QUANTUM)
        assert result.timeline[0].start_time == 0
        assert result.timeline[-1].end_time == result.total_time
        for prev, block in zip(result.timeline, result.timeline[1:], strict=False):
            assert prev.end_time == block.start_time
            assert prev.process_id != block.process_id

    @pytest.mark.parametrize("algorithm", list(CpuAlgorithm))
    def test_empty_workload(self, algorithm: CpuAlgorithm) -> None:
        """No processes ⇒ an empty, all-zero result rather than an error."""
        result = run_cpu_schedule([], algorithm, quantum=DEFAULT_QUANTUM)
        assert result.timeline == ()
        assert result.metrics == {}
        assert result.avg_waiting == 0
        assert result.avg_turnaround == 0
        assert result.total_time == 0

    def test_input_is_not_mutated(self) -> None:
        """The caller's list is left exactly as it was."""
        procs = list(_WORKLOAD)
        run_cpu_schedule(procs, "SRTF")
        assert procs == _WORKLOAD

    def test_unknown_algorithm_rejected(self) -> None:
        """An unknown selector is a configuration error."""
        with pytest.raises(ConfigurationError, match="CPU algorithm"):
            run_cpu_schedule(_WORKLOAD, "MLFQ")

    def test_compare_runs_every_algorithm(self) -> None:
        """compare_algorithms returns one result per algorithm."""
        results = compare_algorithms(_WORKLOAD, quantum=DEFAULT_QUANTUM)
        assert list(results) == list(CpuAlgorithm)
        assert all(r.total_time == _TOTAL_TIME for r in results.values())


class TestSelectionPolicy:
    """The shared selection step used by the non-RR algorithms."""

    def test_first_seen_wins_full_tie(self) -> None:
        """Equal keys keep the earlier candidate."""
        policy = SelectionPolicy(key=lambda t: (t.remaining,))
        first = Task.from_process(Process(id=7, arrival_time=0, burst_time=3))
        second = Task.from_process(Process(id=8, arrival_time=0, burst_time=3))
        assert policy.select([first, second]) is first

    def test_smaller_key_wins(self) -> None:
        """A strictly smaller key replaces the current best."""
        policy = SelectionPolicy(key=lambda t: (t.remaining,))
        long = Task.from_process(Process(id=1, arrival_time=0, burst_time=9))
        short = Task.from_process(Process(id=2, arrival_time=0, burst_time=2))
        assert policy.select([long, short]) is short
