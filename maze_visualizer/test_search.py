"""Tests for the search algorithms and path reconstruction."""

import collections
import random

import pytest

from maze_visualizer.config import ALGORITHMS
from maze_visualizer.grid import Grid, Position
from maze_visualizer.search import (
    DISCOVER, EXHAUSTED, FOUND, VISIT, SearchInvariantError, checked_path, get_search, manhattan,
    reconstruct_path, solve,
)


def distances(grid):
    """Plain flood fill from start: edge count to every reachable cell."""
    dist = {grid.start: 0}
    queue = collections.deque([grid.start])
    while queue:
        current = queue.popleft()
        for n in grid.neighbors(current):
            if grid.is_walkable(n) and n not in dist:
                dist[n] = dist[current] + 1
                queue.append(n)
    return dist


def assert_valid_path(grid, path):
    assert path[0] == grid.start
    assert path[-1] == grid.goal
    for a, b in zip(path, path[1:]):
        assert manhattan(a, b) == 1
    for pos in path:
        assert grid.is_walkable(pos)
    assert len(set(path)) == len(path)


def split_grid():
    """5x5 grid with column 2 walled off, separating Start from Goal."""
    grid = Grid(5)
    for row in range(5):
        grid.toggle_wall((row, 2))
    return grid


def solve_grid(grid, algorithm):
    return solve(grid.walkability(), grid.start, grid.goal, algorithm)


class TestOpenGrid:
    """Searches on a 5x5 grid with no walls."""

    @pytest.mark.parametrize("algorithm", ["BFS", "A*"])
    def test_shortest_path_length(self, algorithm) -> None:
        """(1,1) to (3,3) is four moves, five cells."""
        outcome = solve_grid(Grid(5), algorithm)
        assert outcome.found
        assert outcome.path_length == 5
        assert_valid_path(Grid(5), outcome.path)
        assert 1 <= outcome.nodes_visited <= 25

    def test_dfs_finds_a_valid_path(self) -> None:
        """DFS reaches the goal but may wander."""
        grid = Grid(5)
        outcome = solve_grid(grid, "DFS")
        assert outcome.found
        assert outcome.path_length >= 5
        assert_valid_path(grid, outcome.path)

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_start_equals_goal(self, algorithm) -> None:
        """A search that starts on the goal stops after one visit."""
        walk = Grid(5).walkability()
        outcome = solve(walk, (2, 2), (2, 2), algorithm)
        assert outcome.found
        assert outcome.path == [(2, 2)]
        assert outcome.nodes_visited == 1


class TestTraversalOrder:
    """Exact visit and parent order on a 3x3 open grid from corner to corner."""

    def grid(self):
        return Grid(3, start=(0, 0), goal=(2, 2))

    def test_bfs_path(self) -> None:
        """BFS records the first discoverer, so the path hugs the left column."""
        outcome = solve_grid(self.grid(), "BFS")
        assert outcome.path == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
        assert outcome.nodes_visited == 9

    def test_astar_ties_go_to_earliest_inserted(self) -> None:
        """Every cell has f = 4, so A* expands in insertion order."""
        order = []
        outcome = solve(self.grid().walkability(), (0, 0), (2, 2), "A*",
                        visit=lambda s: order.append(s.position) if s.kind == VISIT else None)
        assert order == [(0, 0), (1, 0), (0, 1), (2, 0), (1, 1), (0, 2), (2, 1), (1, 2), (2, 2)]
        assert outcome.path == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]

    def test_dfs_parent_is_last_push(self) -> None:
        """Pushes overwrite parents, so DFS snakes through every cell."""
        outcome = solve_grid(self.grid(), "DFS")
        assert outcome.path == [
            (0, 0), (0, 1), (0, 2), (1, 2), (1, 1), (1, 0), (2, 0), (2, 1), (2, 2),
        ]
        assert outcome.nodes_visited == 9
        # (1, 1) was first pushed from (0, 1), then again from (1, 2)
        assert outcome.parents[(1, 1)] == (1, 2)


class TestNoPath:
    """Searches where the goal is walled off."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_exhausts_start_component(self, algorithm) -> None:
        """Every reachable cell is visited exactly once before giving up."""
        outcome = solve_grid(split_grid(), algorithm)
        assert not outcome.found
        assert outcome.path == []
        assert outcome.path_length == 0
        assert outcome.nodes_visited == 10

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_terminal_step_is_last(self, algorithm) -> None:
        """The generator ends right after EXHAUSTED."""
        grid = split_grid()
        steps = list(get_search(algorithm)(grid.walkability(), grid.start, grid.goal))
        assert steps[-1].kind == EXHAUSTED
        assert steps[-1].is_terminal
        assert not any(s.is_terminal for s in steps[:-1])
        visits = [s.position for s in steps if s.kind == VISIT]
        assert len(visits) == len(set(visits)) == 10


class TestRandomMazes:
    """Cross-check each algorithm against a flood fill on seeded mazes."""

    @pytest.mark.parametrize("seed", range(20))
    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_against_flood_fill(self, algorithm, seed) -> None:
        grid = Grid(10)
        grid.generate_random(rng=random.Random(seed))
        dist = distances(grid)
        outcome = solve_grid(grid, algorithm)

        assert outcome.found == (grid.goal in dist)
        if not outcome.found:
            assert outcome.nodes_visited == len(dist)
            return
        assert_valid_path(grid, outcome.path)
        if algorithm != "DFS":
            assert outcome.path_length == dist[grid.goal] + 1
        assert outcome.nodes_visited <= len(dist)


class TestSteps:
    """The step stream itself."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_found_carries_parents(self, algorithm) -> None:
        grid = Grid(5)
        steps = list(get_search(algorithm)(grid.walkability(), grid.start, grid.goal))
        last = steps[-1]
        assert last.kind == FOUND
        assert last.position == grid.goal
        assert reconstruct_path(last.parents, grid.goal)[0] == grid.start
        assert any(s.kind == DISCOVER for s in steps)

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_counts_are_monotonic(self, algorithm) -> None:
        grid = Grid(10)
        grid.generate_random(rng=random.Random(3))
        counts = [s.nodes_visited for s in get_search(algorithm)(grid.walkability(), grid.start, grid.goal)
                  if s.kind == VISIT]
        assert counts == list(range(1, len(counts) + 1))

    def test_ignores_walls_added_mid_search(self) -> None:
        """The search sees the walls as they were when it started."""
        grid = Grid(5)
        steps = get_search("BFS")(grid.walkability(), grid.start, grid.goal)
        next(steps)
        for row in range(5):
            grid.toggle_wall((row, 2))
        kinds = [s.kind for s in steps]
        assert kinds[-1] == FOUND

    def test_close_midway(self) -> None:
        """Abandoning a search is just closing the generator."""
        grid = Grid(5)
        steps = get_search("A*")(grid.walkability(), grid.start, grid.goal)
        next(steps)
        steps.close()
        assert list(steps) == []

    def test_unknown_algorithm(self) -> None:
        with pytest.raises(ValueError):
            get_search("Dijkstra")


class TestReconstructPath:
    """Tests for following parent pointers."""

    def test_simple_chain(self) -> None:
        parents = {(0, 1): (0, 0), (0, 2): (0, 1)}
        assert reconstruct_path(parents, (0, 2)) == [(0, 0), (0, 1), (0, 2)]

    def test_missing_goal(self) -> None:
        assert reconstruct_path({(0, 1): (0, 0)}, (4, 4)) == []

    def test_cycle_is_an_error(self) -> None:
        with pytest.raises(SearchInvariantError):
            reconstruct_path({(0, 0): (0, 1), (0, 1): (0, 0)}, (0, 0))

    def test_checked_path_wrong_start(self) -> None:
        parents = {(0, 1): (0, 0)}
        assert checked_path(parents, (0, 0), (0, 1)) == [Position(0, 0), Position(0, 1)]
        with pytest.raises(SearchInvariantError):
            checked_path(parents, (1, 1), (0, 1))

    def test_checked_path_missing_goal(self) -> None:
        with pytest.raises(SearchInvariantError):
            checked_path({}, (0, 0), (0, 1))
