"""
Shared contract for the search algorithms.

Every algorithm is a generator over an immutable Walkability snapshot that
yields SearchStep records:

  - VISIT     a node was dequeued/popped and finalized (counted in nodes_visited)
  - DISCOVER  a frontier edge was relaxed and the neighbor queued
  - FOUND     terminal; carries the parent map that reaches the goal
  - EXHAUSTED terminal; the frontier ran dry. The explored parent map is
              attached but no path is produced

The generator can be abandoned at any yield (close()) without side effects:
all frontier and parent state lives inside it.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from maze_visualizer.grid import Position

VISIT = "visit"
DISCOVER = "discover"
FOUND = "found"
EXHAUSTED = "exhausted"


class SearchInvariantError(AssertionError):
    """A search reported the goal but its parent map does not lead there."""


@dataclass(frozen=True)
class SearchStep:
    kind: str
    position: Optional[Position] = None
    nodes_visited: int = 0
    parents: Optional[Dict[Position, Position]] = None

    @property
    def is_terminal(self):
        return self.kind in (FOUND, EXHAUSTED)


@dataclass
class SearchOutcome:
    algorithm: str
    found: bool
    nodes_visited: int
    path: List[Position] = field(default_factory=list)
    parents: Dict[Position, Position] = field(default_factory=dict)

    @property
    def path_length(self):
        return len(self.path)


def reconstruct_path(parents, goal):
    """Follow parent pointers from goal back to the node without a parent.

    Returns the route start -> goal inclusive, or [] when goal has no parent
    entry at all.
    """
    if goal not in parents:
        return []
    path = [goal]
    current = goal
    limit = len(parents) + 1
    while current in parents:
        current = parents[current]
        path.append(current)
        limit -= 1
        if limit < 0:
            raise SearchInvariantError(f"parent map contains a cycle through {current}")
    path.reverse()
    return path


def checked_path(parents, start, goal):
    if start == goal:
        return [start]
    path = reconstruct_path(parents, goal)
    if not path or path[0] != start or path[-1] != goal:
        raise SearchInvariantError(f"goal {goal} reported but parent map does not reach it from {start}")
    return path


def manhattan(a, b):
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def get_search(algorithm):
    # Imported here: the algorithm modules import this one for the step types.
    from maze_visualizer.astar import astar
    from maze_visualizer.bfs import bfs
    from maze_visualizer.dfs import dfs

    searches = {"BFS": bfs, "DFS": dfs, "A*": astar}
    try:
        return searches[algorithm]
    except KeyError:
        raise ValueError(f"unknown algorithm {algorithm!r}") from None


def solve(walkability, start, goal, algorithm, visit=None):
    """Run one search to completion without animation.

    visit, when given, is called with every SearchStep including the
    terminal one.
    """
    start, goal = Position(*start), Position(*goal)
    steps = get_search(algorithm)(walkability, start, goal)
    for step in steps:
        if visit is not None:
            visit(step)
        if step.kind == FOUND:
            path = checked_path(step.parents, start, goal)
            return SearchOutcome(algorithm, True, step.nodes_visited, path, dict(step.parents))
        if step.kind == EXHAUSTED:
            return SearchOutcome(algorithm, False, step.nodes_visited, parents=dict(step.parents or {}))
    raise SearchInvariantError(f"{algorithm} ended without a terminal step")
