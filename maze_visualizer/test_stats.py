"""Tests for run statistics and the results history."""

import pytest

from maze_visualizer.stats import ResultsHistory, RunResult, RunStatus, StatsCollector, StatsSnapshot


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


class TestStatsCollector:
    """Tests for the per-run counters."""

    def test_starts_ready(self, clock) -> None:
        stats = StatsCollector(clock)
        assert stats.snapshot() == StatsSnapshot(RunStatus.READY, 0, 0, 0)
        assert stats.result("BFS") is None

    def test_live_elapsed_while_running(self, clock) -> None:
        """The running snapshot reflects time so far."""
        stats = StatsCollector(clock)
        stats.begin()
        clock.now = 0.25
        stats.node_finalized()
        stats.node_finalized()
        snap = stats.snapshot()
        assert snap.status is RunStatus.RUNNING
        assert snap.nodes_visited == 2
        assert snap.elapsed_ms == 250

    def test_elapsed_frozen_after_complete(self, clock) -> None:
        """Time stops at the terminal state."""
        stats = StatsCollector(clock)
        clock.now = 10.0
        stats.begin()
        stats.node_finalized(7)
        clock.now = 10.5
        stats.complete(5)
        clock.now = 99.0
        snap = stats.snapshot()
        assert snap == StatsSnapshot(RunStatus.COMPLETE, 7, 5, 500)
        assert stats.result("A*") == RunResult("A*", 5, 500, 7)

    def test_no_path_has_no_result(self, clock) -> None:
        stats = StatsCollector(clock)
        stats.begin()
        stats.node_finalized(10)
        stats.no_path()
        assert stats.snapshot().status is RunStatus.NO_PATH
        assert stats.snapshot().path_length == 0
        assert stats.result("DFS") is None

    def test_begin_resets_counters(self, clock) -> None:
        stats = StatsCollector(clock)
        stats.begin()
        stats.node_finalized(3)
        stats.complete(2)
        stats.begin()
        assert stats.snapshot() == StatsSnapshot(RunStatus.RUNNING, 0, 0, 0)

    def test_describe(self) -> None:
        snap = StatsSnapshot(RunStatus.COMPLETE, 12, 5, 340)
        assert snap.describe() == (
            "Status: Complete  |  Nodes visited: 12  |  Path length: 5  |  Time: 340ms"
        )

    def test_terminal_statuses(self) -> None:
        assert RunStatus.COMPLETE.is_terminal
        assert RunStatus.NO_PATH.is_terminal
        assert not RunStatus.RUNNING.is_terminal
        assert not RunStatus.READY.is_terminal


class TestResultsHistory:
    """Tests for the one-result-per-algorithm history."""

    def test_record_and_get(self) -> None:
        history = ResultsHistory()
        history.record(RunResult("BFS", 5, 100, 20))
        assert len(history) == 1
        assert "BFS" in history
        assert history.get("BFS").visited == 20
        assert history.get("A*") is None

    def test_rerun_replaces_previous(self) -> None:
        """A second BFS result overwrites the first and moves to the end."""
        history = ResultsHistory()
        history.record(RunResult("BFS", 5, 100, 20))
        history.record(RunResult("A*", 5, 80, 12))
        history.record(RunResult("BFS", 7, 90, 30))
        assert len(history) == 2
        assert [r.algorithm for r in history] == ["A*", "BFS"]
        assert history.get("BFS") == RunResult("BFS", 7, 90, 30)

    def test_clear(self) -> None:
        history = ResultsHistory()
        history.record(RunResult("DFS", 9, 10, 9))
        history.clear()
        assert len(history) == 0
        assert history.results() == []

    def test_as_dict(self) -> None:
        assert RunResult("BFS", 5, 100, 20).as_dict() == {
            "algorithm": "BFS", "path_length": 5, "time": 100, "visited": 20,
        }
