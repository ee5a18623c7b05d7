from dataclasses import dataclass

# --- Grid ---
GRID_SIZES = (10, 15, 20, 25, 30)
DEFAULT_GRID_SIZE = 20
WALL_PROBABILITY = 0.3

# --- Algorithms ---
ALGORITHMS = ("BFS", "DFS", "A*")
DEFAULT_ALGORITHM = "BFS"

# --- Animation (milliseconds) ---
MIN_DELAY_MS = 10
MAX_DELAY_MS = 200
DEFAULT_DELAY_MS = 50
PATH_DELAY_FACTOR = 0.5  # path cells replay at half the search delay

# --- GUI ---
CELL_SIZE = 20

# --- Color Scheme ---
BG_COLOR = "#2c3e50"
EMPTY_COLOR = "#ecf0f1"
WALL_COLOR = "#34495e"
START_COLOR = "#1abc9c"
GOAL_COLOR = "#e74c3c"
EXPLORED_COLOR = "#85c1e9"
PATH_COLOR = "#f1c40f"
GRID_LINE_COLOR = "#bdc3c7"


def validate_grid_size(size):
    if size not in GRID_SIZES:
        raise ValueError(f"grid size must be one of {GRID_SIZES}, got {size!r}")
    return size


def validate_algorithm(algorithm):
    if algorithm not in ALGORITHMS:
        raise ValueError(f"algorithm must be one of {ALGORITHMS}, got {algorithm!r}")
    return algorithm


def clamp_delay(delay_ms):
    return max(MIN_DELAY_MS, min(MAX_DELAY_MS, int(delay_ms)))


@dataclass
class RunConfig:
    """User-selected settings for the next run.

    show_explored is only a rendering hint; the engine always marks explored
    cells and the renderer decides whether to draw them.
    """
    algorithm: str = DEFAULT_ALGORITHM
    delay_ms: int = DEFAULT_DELAY_MS
    show_explored: bool = True

    def __post_init__(self):
        validate_algorithm(self.algorithm)
        if not MIN_DELAY_MS <= self.delay_ms <= MAX_DELAY_MS:
            raise ValueError(
                f"delay_ms must be within [{MIN_DELAY_MS}, {MAX_DELAY_MS}], got {self.delay_ms!r}"
            )
