import enum
import time
from dataclasses import asdict, dataclass


class RunStatus(enum.Enum):
    READY = "Ready"
    RUNNING = "Running..."
    COMPLETE = "Complete"
    NO_PATH = "No path found"

    @property
    def is_terminal(self):
        return self in (RunStatus.COMPLETE, RunStatus.NO_PATH)


@dataclass(frozen=True)
class StatsSnapshot:
    status: RunStatus = RunStatus.READY
    nodes_visited: int = 0
    path_length: int = 0
    elapsed_ms: int = 0

    def describe(self):
        return (
            f"Status: {self.status.value}  |  "
            f"Nodes visited: {self.nodes_visited}  |  "
            f"Path length: {self.path_length}  |  "
            f"Time: {self.elapsed_ms}ms"
        )


@dataclass(frozen=True)
class RunResult:
    """One completed run, as shown on the comparison dashboard."""
    algorithm: str
    path_length: int
    time: int
    visited: int

    def as_dict(self):
        return asdict(self)


class StatsCollector:
    """
    Counters for the run in progress.

    Metrics:
      - nodes_visited: one per finalized node (duplicate DFS pops excluded).
      - path_length: cells on the reconstructed route, Start and Goal included.
      - elapsed_ms: wall-clock time from begin() to the terminal state,
        animation delays included. Frozen once the run ends.

    clock must return seconds; time.perf_counter by default.
    """
    def __init__(self, clock=time.perf_counter):
        self.clock = clock
        self.reset()

    def reset(self):
        self.status = RunStatus.READY
        self.nodes_visited = 0
        self.path_length = 0
        self._started_at = None
        self._elapsed_ms = 0

    def begin(self):
        self.reset()
        self.status = RunStatus.RUNNING
        self._started_at = self.clock()

    def node_finalized(self, nodes_visited=None):
        if nodes_visited is None:
            self.nodes_visited += 1
        else:
            self.nodes_visited = nodes_visited

    def complete(self, path_length):
        self.path_length = path_length
        self._stop(RunStatus.COMPLETE)

    def no_path(self):
        self._stop(RunStatus.NO_PATH)

    def _stop(self, status):
        self._elapsed_ms = self._now_ms()
        self.status = status

    def _now_ms(self):
        if self._started_at is None:
            return 0
        return int(round((self.clock() - self._started_at) * 1000))

    @property
    def elapsed_ms(self):
        if self.status is RunStatus.RUNNING:
            return self._now_ms()
        return self._elapsed_ms

    def snapshot(self):
        return StatsSnapshot(self.status, self.nodes_visited, self.path_length, self.elapsed_ms)

    def result(self, algorithm):
        if self.status is not RunStatus.COMPLETE:
            return None
        return RunResult(algorithm, self.path_length, self._elapsed_ms, self.nodes_visited)


class ResultsHistory:
    """Latest RunResult per algorithm.

    Recording an algorithm again replaces its previous entry and moves it to
    the end, so iteration order is the order of most recent completion.
    """
    def __init__(self):
        self._results = {}

    def record(self, result):
        self._results.pop(result.algorithm, None)
        self._results[result.algorithm] = result

    def get(self, algorithm):
        return self._results.get(algorithm)

    def results(self):
        return list(self._results.values())

    def clear(self):
        self._results.clear()

    def __len__(self):
        return len(self._results)

    def __iter__(self):
        return iter(self.results())

    def __contains__(self, algorithm):
        return algorithm in self._results
