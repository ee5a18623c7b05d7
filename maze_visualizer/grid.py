import enum
import random
from dataclasses import dataclass
from typing import Dict, FrozenSet, NamedTuple, Tuple

from maze_visualizer.config import DEFAULT_GRID_SIZE, WALL_PROBABILITY


class Position(NamedTuple):
    row: int
    col: int


class CellKind(enum.Enum):
    EMPTY = "empty"
    WALL = "wall"
    START = "start"
    GOAL = "goal"
    EXPLORED = "explored"
    PATH = "path"


OVERLAY_KINDS = (CellKind.EXPLORED, CellKind.PATH)

# Up, down, left, right. Traversal order depends on this.
DIRECTIONS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def in_bounds(pos, size):
    return 0 <= pos[0] < size and 0 <= pos[1] < size


def neighbors4(pos, size):
    """In-bounds 4-connected neighbors of pos, in DIRECTIONS order."""
    row, col = pos
    out = []
    for dr, dc in DIRECTIONS:
        n = Position(row + dr, col + dc)
        if in_bounds(n, size):
            out.append(n)
    return out


def default_endpoints(size):
    return Position(1, 1), Position(size - 2, size - 2)


@dataclass(frozen=True)
class Walkability:
    """Immutable wall layout captured when a search starts."""
    size: int
    walls: FrozenSet[Position]

    def is_walkable(self, pos):
        return in_bounds(pos, self.size) and pos not in self.walls

    def neighbors(self, pos):
        return neighbors4(pos, self.size)

    def open_neighbors(self, pos):
        return [n for n in neighbors4(pos, self.size) if n not in self.walls]


@dataclass(frozen=True)
class GridSnapshot:
    """Read-only picture of every cell, row-major."""
    size: int
    cells: Tuple[Tuple[CellKind, ...], ...]

    def __getitem__(self, pos):
        return self.cells[pos[0]][pos[1]]

    def count(self, kind):
        return sum(row.count(kind) for row in self.cells)


class Grid:
    """
    Square N x N maze with exactly one Start and one Goal.

    Representation:
      - self.walls is the authoritative wall layout (a set of Positions).
      - self.overlay holds the per-run markings (Explored / Path). It is layered
        over the walls and is wiped on every reset, so clearing it always
        returns cells to Empty or Wall.
      - Start and Goal are stored as positions and are never walls or overlay.

    While self.locked is set (a run is in progress) every editing operation is
    rejected and returns False.
    """
    def __init__(self, size=DEFAULT_GRID_SIZE, start=None, goal=None):
        self.locked = False
        self.initialize(size, start, goal)

    def initialize(self, size, start=None, goal=None):
        """Rebuild an empty size x size grid.

        start/goal default to (1, 1) and (size-2, size-2). Size is expected to
        be validated by the caller; the endpoints are checked here and must be
        two distinct in-bounds cells (ValueError otherwise, grid unchanged).
        """
        if self.locked:
            return False
        default_start, default_goal = default_endpoints(size)
        start = Position(*(start if start is not None else default_start))
        goal = Position(*(goal if goal is not None else default_goal))
        for name, pos in (("start", start), ("goal", goal)):
            if not in_bounds(pos, size):
                raise ValueError(f"{name} {tuple(pos)} is outside a {size}x{size} grid")
        if start == goal:
            raise ValueError(f"start and goal must differ, both are {tuple(start)}")

        self.size = size
        self.start = start
        self.goal = goal
        self.walls = set()
        self.overlay: Dict[Position, CellKind] = {}
        return True

    def generate_random(self, size=None, start=None, goal=None,
                        wall_probability=WALL_PROBABILITY, rng=None):
        """
        Rebuilds the grid and turns each non-Start/Goal cell into a wall with
        probability wall_probability.

        Cells are visited in row-major order and each draws exactly one number
        from rng, so a seeded random.Random reproduces the same maze. When rng
        is None the module-level random source is used.
        """
        if self.locked:
            return False
        if size is None:
            size = self.size
        self.initialize(size, start, goal)
        source = rng if rng is not None else random
        for row in range(self.size):
            for col in range(self.size):
                pos = Position(row, col)
                roll = source.random()
                if pos in (self.start, self.goal):
                    continue
                if roll < wall_probability:
                    self.walls.add(pos)
        return True

    def toggle_wall(self, pos):
        """Flip a cell between Empty and Wall.

        Start, Goal and out-of-bounds positions are left alone, as is every
        cell while the grid is locked. Overlay markings stay underneath a wall,
        so toggling twice gives back the original kind.
        """
        pos = Position(*pos)
        if self.locked or not self.in_bounds(pos) or pos in (self.start, self.goal):
            return False
        if pos in self.walls:
            self.walls.remove(pos)
        else:
            self.walls.add(pos)
        return True

    def set_wall(self, pos, is_wall):
        """Used by click-and-drag drawing: only toggles when the state differs."""
        if (Position(*pos) in self.walls) == bool(is_wall):
            return False
        return self.toggle_wall(pos)

    def in_bounds(self, pos):
        return in_bounds(pos, self.size)

    def is_walkable(self, pos):
        return self.in_bounds(pos) and Position(*pos) not in self.walls

    def neighbors(self, pos):
        return neighbors4(pos, self.size)

    def kind_at(self, pos):
        pos = Position(*pos)
        if pos == self.start:
            return CellKind.START
        if pos == self.goal:
            return CellKind.GOAL
        if pos in self.walls:
            return CellKind.WALL
        return self.overlay.get(pos, CellKind.EMPTY)

    def mark(self, pos, kind):
        """Apply an overlay marking. Returns True if the visible cell changed.

        Start, Goal and walls are never marked; Path may replace Explored.
        """
        if kind not in OVERLAY_KINDS:
            raise ValueError(f"{kind} is not an overlay kind")
        pos = Position(*pos)
        if pos in (self.start, self.goal) or pos in self.walls:
            return False
        if self.overlay.get(pos) is kind:
            return False
        self.overlay[pos] = kind
        return True

    def clear_overlay(self):
        self.overlay.clear()

    def walkability(self):
        return Walkability(self.size, frozenset(self.walls))

    def snapshot(self):
        return GridSnapshot(
            self.size,
            tuple(
                tuple(self.kind_at((row, col)) for col in range(self.size))
                for row in range(self.size)
            ),
        )
