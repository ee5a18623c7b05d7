import enum
import logging
import time
from dataclasses import dataclass, field
from typing import Dict

from maze_visualizer.config import PATH_DELAY_FACTOR, RunConfig, validate_algorithm, validate_grid_size
from maze_visualizer.grid import CellKind, Position
from maze_visualizer.search import DISCOVER, EXHAUSTED, FOUND, VISIT, checked_path, get_search
from maze_visualizer.stats import ResultsHistory, StatsCollector, StatsSnapshot

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETE = "complete"
    NO_PATH = "no_path"


SEARCH_PHASE = "search"
PATH_PHASE = "path"


@dataclass(frozen=True)
class Frame:
    """One suspension point: the overlay diff just applied plus live stats."""
    phase: str
    changes: Dict[Position, CellKind] = field(default_factory=dict)
    stats: StatsSnapshot = field(default_factory=StatsSnapshot)
    delay_factor: float = 1.0


class RunController:
    """
    Orchestrates one run at a time over a shared Grid.

    State machine:
      IDLE --start--> RUNNING --goal found--> COMPLETE
                              --frontier exhausted--> NO_PATH
      RUNNING may be paused/resumed; reset from any state returns to IDLE.

    Integration:
      - The grid is locked while RUNNING, so wall edits are rejected at the
        source and the search works on a walkability snapshot taken at start.
      - Frames are produced lazily and paced by the AnimationScheduler. A frame
        is emitted for each finalized node that changes a cell and for each
        path cell marked.
      - Listeners: on_frame(frame), on_discover(position), on_finish(stats),
        on_result(result). Each is an optional callable and may call back into
        the controller (reset, or start the next run from on_finish). Discoveries
        are delivered just before the next frame.
    """
    def __init__(self, grid, scheduler, config=None, history=None, clock=time.perf_counter):
        self.grid = grid
        self.scheduler = scheduler
        self.config = config if config is not None else RunConfig()
        self.history = history if history is not None else ResultsHistory()
        self.stats = StatsCollector(clock)
        self.state = RunState.IDLE
        self.run_algorithm = None
        self.on_frame = None
        self.on_discover = None
        self.on_finish = None
        self.on_result = None
        self._runs = 0
        self._discovered = []
        self._terminal = None
        self.scheduler.set_delay(self.config.delay_ms)

    # --- Queries ---
    @property
    def is_running(self):
        return self.state is RunState.RUNNING

    @property
    def is_paused(self):
        return self.is_running and self.scheduler.is_paused

    def snapshot(self):
        return self.grid.snapshot()

    def stats_snapshot(self):
        return self.stats.snapshot()

    # --- Configuration (rejected while running) ---
    def set_algorithm(self, algorithm):
        validate_algorithm(algorithm)
        if self.is_running:
            return False
        self.config.algorithm = algorithm
        return True

    def set_delay(self, delay_ms):
        """Speed can change mid-run; it applies from the next suspension."""
        self.scheduler.set_delay(delay_ms)
        self.config.delay_ms = self.scheduler.delay_ms

    def set_show_explored(self, show):
        self.config.show_explored = bool(show)

    def set_grid_size(self, size):
        validate_grid_size(size)
        if self.is_running:
            return False
        self._to_idle()
        return self.grid.initialize(size)

    def toggle_wall(self, pos):
        if self.is_running:
            return False
        return self.grid.toggle_wall(pos)

    def generate_random(self, wall_probability=None, rng=None):
        if self.is_running:
            return False
        self._to_idle()
        if wall_probability is None:
            return self.grid.generate_random(rng=rng)
        return self.grid.generate_random(wall_probability=wall_probability, rng=rng)

    # --- Commands ---
    def start(self, algorithm=None):
        """Begin a run. Returns False (no-op) if one is already in progress."""
        if self.is_running:
            logger.debug("start ignored: run already in progress")
            return False
        if self.scheduler.is_active:
            logger.warning("start ignored: scheduler is busy")
            return False
        if algorithm is not None:
            self.config.algorithm = validate_algorithm(algorithm)

        self.grid.clear_overlay()
        self.grid.locked = True
        self.run_algorithm = self.config.algorithm
        self.state = RunState.RUNNING
        self.stats.begin()
        self._runs += 1
        logger.info("%s run started on %dx%d grid", self.run_algorithm, self.grid.size, self.grid.size)
        if not self.scheduler.start(self._frames(), on_frame=self._emit_frame, on_done=self._run_done):
            self._release()
            return False
        return True

    def pause(self):
        if self.is_running:
            self.scheduler.pause()

    def resume(self):
        if self.is_running:
            self.scheduler.resume()

    def toggle_pause(self):
        if self.is_paused:
            self.resume()
        else:
            self.pause()

    def reset(self):
        """Cancel any run and clear the overlay; walls are kept.

        Safe from inside any listener.
        """
        if self.is_running:
            logger.info("%s run cancelled", self.run_algorithm)
        self._to_idle()

    def _to_idle(self):
        self.scheduler.cancel()
        self.grid.clear_overlay()
        self._release()

    def _release(self):
        self.grid.locked = False
        self.stats.reset()
        self.state = RunState.IDLE
        self.run_algorithm = None
        self._discovered = []
        self._terminal = None

    # --- Run body ---
    def _frames(self):
        """Frame generator for one run.

        Listeners are never called from in here. Discoveries are queued for
        the next frame and the outcome is left in self._terminal, so that
        everything reaching outside runs after the scheduler hands control
        back.
        """
        grid = self.grid
        start, goal = grid.start, grid.goal
        search = get_search(self.run_algorithm)(grid.walkability(), start, goal)

        for step in search:
            if step.kind == VISIT:
                self.stats.node_finalized(step.nodes_visited)
                if grid.mark(step.position, CellKind.EXPLORED):
                    yield Frame(SEARCH_PHASE, {step.position: CellKind.EXPLORED}, self.stats.snapshot())
            elif step.kind == DISCOVER:
                self._discovered.append(step.position)
            elif step.kind == FOUND:
                path = checked_path(step.parents, start, goal)
                for pos in path:
                    if grid.mark(pos, CellKind.PATH):
                        yield Frame(PATH_PHASE, {pos: CellKind.PATH}, self.stats.snapshot(), PATH_DELAY_FACTOR)
                self._terminal = (RunState.COMPLETE, len(path))
                return
            elif step.kind == EXHAUSTED:
                self._terminal = (RunState.NO_PATH, 0)
                return

    def _flush_discovered(self):
        run = self._runs
        pending, self._discovered = self._discovered, []
        for pos in pending:
            # a listener may reset or restart
            if self.on_discover is None or not self.is_running or self._runs != run:
                break
            self.on_discover(pos)

    def _emit_frame(self, frame):
        run = self._runs
        self._flush_discovered()
        if self.is_running and self._runs == run and self.on_frame is not None:
            self.on_frame(frame)

    def _run_done(self):
        self._flush_discovered()
        if self._terminal is None:
            return
        state, path_length = self._terminal
        self._terminal = None
        self._finish(state, path_length)

    def _finish(self, state, path_length=0):
        self.state = state
        self.grid.locked = False
        if state is RunState.COMPLETE:
            self.stats.complete(path_length)
        else:
            self.stats.no_path()
        snapshot = self.stats.snapshot()
        result = self.stats.result(self.run_algorithm)
        logger.info("%s run finished: %s", self.run_algorithm, snapshot.describe())
        if result is not None:
            self.history.record(result)

        # listeners may start the next run from here
        if self.on_finish is not None:
            self.on_finish(snapshot)
        if result is not None and self.on_result is not None:
            self.on_result(result)
