"""Grid maze pathfinding visualizer: BFS, DFS and A* as animated step sequences."""

__version__ = "0.1.0"
