import collections

from maze_visualizer.search import DISCOVER, EXHAUSTED, FOUND, VISIT, SearchStep


def bfs(walkability, start, goal):
    """Breadth-First Search as a step generator.

    BFS Semantics:
      - Frontier: FIFO queue of discovered but not yet expanded nodes.
      - A neighbor is marked seen when it is enqueued, so no cell is ever
        queued twice.
      - The goal is recognized when it is dequeued. Layers leave the queue in
        nondecreasing distance, so the first time the goal comes out its
        parent chain is a shortest path in edge count.
    """
    queue = collections.deque([start])
    seen = {start}
    parents = {}
    visited = 0

    while queue:
        current = queue.popleft()
        visited += 1
        yield SearchStep(VISIT, current, visited)

        if current == goal:
            yield SearchStep(FOUND, current, visited, parents)
            return

        for neighbor in walkability.open_neighbors(current):
            if neighbor not in seen:
                seen.add(neighbor)
                parents[neighbor] = current
                queue.append(neighbor)
                yield SearchStep(DISCOVER, neighbor, visited)

    yield SearchStep(EXHAUSTED, None, visited, parents)
