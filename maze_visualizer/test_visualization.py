"""Tests for the search tree graph."""

from maze_visualizer.grid import Grid
from maze_visualizer.search import solve
from maze_visualizer.visualization import PATH_EDGE_COLOR, node_id, search_tree


class TestSearchTree:
    """Tests for building the Digraph; nothing is rendered."""

    def test_node_id(self) -> None:
        assert node_id((3, 12)) == "3,12"

    def test_edges_follow_parents(self) -> None:
        parents = {(0, 1): (0, 0), (1, 0): (0, 0), (1, 1): (0, 1)}
        source = search_tree(parents).source
        assert source.count("->") == 3
        assert '"0,0" -> "0,1"' in source
        assert '"0,1" -> "1,1"' in source
        assert PATH_EDGE_COLOR not in source

    def test_path_is_highlighted(self) -> None:
        grid = Grid(5)
        outcome = solve(grid.walkability(), grid.start, grid.goal, "BFS")
        dot = search_tree(outcome.parents, outcome.path, name="bfs")
        assert dot.name == "bfs"
        assert dot.source.count("->") == len(outcome.parents)
        # one colored edge per step along the path
        assert dot.source.count(f"[color=\"{PATH_EDGE_COLOR}\"") == outcome.path_length - 1
        assert dot.source.count(f"fillcolor=\"{PATH_EDGE_COLOR}\"") == outcome.path_length

    def test_empty_tree(self) -> None:
        assert "->" not in search_tree({}).source
