import argparse
import logging
import random

from graphviz import Digraph

from maze_visualizer.config import ALGORITHMS, DEFAULT_GRID_SIZE, GRID_SIZES, WALL_PROBABILITY
from maze_visualizer.grid import Grid
from maze_visualizer.search import solve

logger = logging.getLogger(__name__)

PATH_EDGE_COLOR = "#e67e22"


def node_id(pos):
    return f"{pos[0]},{pos[1]}"


def search_tree(parents, path=None, name="search_tree"):
    """Graph of parent -> child edges from a search's parent map.

    Nodes and edges on path (if given) are highlighted.
    """
    dot = Digraph(name)
    on_path = set(path or [])
    path_edges = set(zip(path or [], (path or [])[1:]))

    nodes = set(parents) | set(parents.values())
    for pos in sorted(nodes):
        if pos in on_path:
            dot.node(node_id(pos), style="filled", fillcolor=PATH_EDGE_COLOR)
        else:
            dot.node(node_id(pos))
    for child, parent in sorted(parents.items()):
        if (parent, child) in path_edges:
            dot.edge(node_id(parent), node_id(child), color=PATH_EDGE_COLOR, penwidth="2")
        else:
            dot.edge(node_id(parent), node_id(child))
    return dot


def render_search_tree(parents, filename, path=None, fmt="png", view=False):
    dot = search_tree(parents, path)
    dot.format = fmt
    return dot.render(filename, view=view, cleanup=True)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Render the search tree of one run on a random maze.")
    parser.add_argument("--algorithm", default="DFS", choices=ALGORITHMS)
    parser.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE, choices=GRID_SIZES)
    parser.add_argument("--wall-probability", type=float, default=WALL_PROBABILITY)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", default="search_tree")
    parser.add_argument("--view", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    grid = Grid(args.size)
    grid.generate_random(wall_probability=args.wall_probability, rng=random.Random(args.seed))
    outcome = solve(grid.walkability(), grid.start, grid.goal, args.algorithm)
    if not outcome.found:
        logger.warning("%s found no path; rendering the explored tree only", args.algorithm)
    out = render_search_tree(outcome.parents, args.output, outcome.path, view=args.view)
    print(f"Wrote {out} ({outcome.nodes_visited} nodes visited, path length {outcome.path_length})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
