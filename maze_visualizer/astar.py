from math import inf

from maze_visualizer.search import DISCOVER, EXHAUSTED, FOUND, VISIT, SearchStep, manhattan


def astar(walkability, start, goal):
    """A* as a step generator.

    A* Semantics:
      - f = g + h with unit edge cost and the Manhattan heuristic, which is
        admissible and consistent on a 4-connected grid.
      - The open set is an insertion-ordered dict scanned for the minimum f on
        every iteration; ties go to the earliest inserted node. Improving the
        g-score of a node already open keeps its place in that order.
      - Closed nodes are never reopened.
      - Walls come from the walkability snapshot taken at search start.
    """
    g_score = {start: 0}
    f_score = {start: manhattan(start, goal)}
    open_set = {start: None}
    closed = set()
    parents = {}
    visited = 0

    while open_set:
        current = min(open_set, key=f_score.__getitem__)
        visited += 1
        yield SearchStep(VISIT, current, visited)

        if current == goal:
            yield SearchStep(FOUND, current, visited, parents)
            return

        del open_set[current]
        closed.add(current)

        tentative = g_score[current] + 1
        for neighbor in walkability.open_neighbors(current):
            if neighbor in closed:
                continue
            if tentative < g_score.get(neighbor, inf):
                parents[neighbor] = current
                g_score[neighbor] = tentative
                f_score[neighbor] = tentative + manhattan(neighbor, goal)
                open_set[neighbor] = None
                yield SearchStep(DISCOVER, neighbor, visited)

    yield SearchStep(EXHAUSTED, None, visited, parents)
