from maze_visualizer.search import DISCOVER, EXHAUSTED, FOUND, VISIT, SearchStep


def dfs(walkability, start, goal):
    """Depth-First Search as a step generator.

    DFS Semantics:
      - Frontier: LIFO stack. A cell may be pushed several times before it is
        popped; it is only marked visited when popped, and later pops of the
        same cell are skipped without counting.
      - The parent pointer is written at push time, so the last push before a
        cell's first pop decides its recorded parent.
      - Neighbors are pushed in up, down, left, right order, which makes
        "right" the first branch explored.
      - The path found is not necessarily the shortest.
    """
    stack = [start]
    seen = set()
    parents = {}
    visited = 0

    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        visited += 1
        yield SearchStep(VISIT, current, visited)

        if current == goal:
            yield SearchStep(FOUND, current, visited, parents)
            return

        for neighbor in walkability.open_neighbors(current):
            if neighbor not in seen:
                parents[neighbor] = current
                stack.append(neighbor)
                yield SearchStep(DISCOVER, neighbor, visited)

    yield SearchStep(EXHAUSTED, None, visited, parents)
