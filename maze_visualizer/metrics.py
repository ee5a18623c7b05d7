import argparse
import csv
import logging
import os
import random
import statistics
import time

from matplotlib.figure import Figure

from maze_visualizer.config import ALGORITHMS, DEFAULT_GRID_SIZE, GRID_SIZES, MIN_DELAY_MS, WALL_PROBABILITY, RunConfig
from maze_visualizer.controller import RunController
from maze_visualizer.grid import Grid
from maze_visualizer.scheduler import AnimationScheduler, ManualTimer
from maze_visualizer.stats import ResultsHistory

logger = logging.getLogger(__name__)

# Rough per-node bookkeeping cost used by the comparison dashboard.
MEMORY_KB_PER_NODE = 2.5

METRICS = ["elapsed_ms", "nodes_visited", "path_length"]
DASHBOARD_METRICS = ["path_length", "time", "visited", "memory_kb"]
SUMMARY_STATS = ("avg", "min", "max", "stdev")


def build_grid(size, wall_probability=WALL_PROBABILITY, seed=None):
    grid = Grid(size)
    grid.generate_random(wall_probability=wall_probability, rng=random.Random(seed))
    return grid


def run_headless(grid, algorithm, history=None, clock=time.perf_counter):
    """Run the full controller/scheduler pipeline without waiting on delays.

    Returns the controller so callers can read its stats and history.
    """
    timer = ManualTimer()
    scheduler = AnimationScheduler(timer.after, timer.after_cancel, MIN_DELAY_MS)
    controller = RunController(grid, scheduler, RunConfig(algorithm, MIN_DELAY_MS), history, clock)
    controller.start()
    timer.run_until_idle()
    return controller


def run_single(size, algorithm, wall_probability=WALL_PROBABILITY, seed=None):
    grid = build_grid(size, wall_probability, seed)
    controller = run_headless(grid, algorithm)
    stats = controller.stats_snapshot()
    return {
        "algorithm": algorithm,
        "size": size,
        "wall_probability": wall_probability,
        "seed": seed,
        "status": stats.status.value,
        "finished": stats.path_length > 0,
        "nodes_visited": stats.nodes_visited,
        "path_length": stats.path_length,
        "elapsed_ms": stats.elapsed_ms,
    }


def compare_algorithms(grid, algorithms=ALGORITHMS, history=None):
    """Run each algorithm in turn on the same grid; one result per success."""
    history = history if history is not None else ResultsHistory()
    for algorithm in algorithms:
        run_headless(grid, algorithm, history)
        # leave the grid as we found it for the next algorithm
        grid.clear_overlay()
    return history


def performance_rows(history):
    rows = []
    for result in history:
        row = result.as_dict()
        row["memory_kb"] = round(result.visited * MEMORY_KB_PER_NODE)
        rows.append(row)
    return rows


def best_algorithm(rows, metric):
    """Algorithm with the smallest value of metric; ties go to the earliest row."""
    if not rows:
        return ""
    return min(rows, key=lambda r: r[metric])["algorithm"]


def summarize(values):
    """avg/min/max/stdev of one metric over a group of runs; zeros for no runs."""
    if not values:
        return dict.fromkeys(SUMMARY_STATS, 0)
    return dict(zip(SUMMARY_STATS, (statistics.mean(values), min(values), max(values), statistics.pstdev(values))))


def metric_values(runs, metric):
    # a run that never reached the goal has no path to measure
    if metric == "path_length":
        runs = [run for run in runs if run["finished"]]
    return [run[metric] for run in runs]


def aggregate_results(rows, group_by=("size", "algorithm")):
    """One summary row per group: count, finished_rate and <metric>_<stat> columns."""
    groups = {}
    for row in rows:
        groups.setdefault(tuple(row[k] for k in group_by), []).append(row)

    summary = []
    for key, runs in groups.items():
        entry = dict(zip(group_by, key), count=len(runs))
        for metric in METRICS:
            for stat, value in summarize(metric_values(runs, metric)).items():
                entry[f"{metric}_{stat}"] = value
        entry["finished_rate"] = sum(1 for run in runs if run["finished"]) / len(runs)
        summary.append(entry)
    return summary


def _ensure_parent(path):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)


def write_csv(path, rows):
    """Header comes from the first row. Writes nothing when there are no rows."""
    if not rows:
        return None
    _ensure_parent(path)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0]))
        writer.writeheader()
        writer.writerows(rows)
    return path


def draw_metric(ax, rows, metric_key, label_key="algorithm"):
    labels = [str(r.get(label_key, "")) for r in rows]
    values = [r.get(metric_key, 0) for r in rows]
    ax.clear()
    bars = ax.bar(range(len(values)), values)
    ax.set_xticks(range(len(values)))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_ylabel(metric_key)
    for bar, v in zip(bars, values):
        ax.text(bar.get_x() + bar.get_width() / 2.0, bar.get_height(), format_value(v),
                ha="center", va="bottom", fontsize=8)
    return bars


def plot_metric(rows, metric_key, out_path, label_key="algorithm"):
    fig = Figure(figsize=(max(6, len(rows) * 0.8), 4))
    ax = fig.add_subplot(111)
    draw_metric(ax, rows, metric_key, label_key)
    fig.tight_layout()
    _ensure_parent(out_path)
    fig.savefig(out_path)
    return out_path


def format_value(v):
    if isinstance(v, float) and not v.is_integer():
        return f"{v:.2f}"
    return str(int(v))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run BFS, DFS and A* on random mazes and compare metrics.")
    parser.add_argument("--runs", type=int, default=10, help="Random mazes per algorithm")
    parser.add_argument("--size", type=int, default=DEFAULT_GRID_SIZE, choices=GRID_SIZES)
    parser.add_argument("--wall-probability", type=float, default=WALL_PROBABILITY)
    parser.add_argument("--algorithms", nargs="*", default=list(ALGORITHMS), choices=ALGORITHMS)
    parser.add_argument("--seed", type=int, default=None, help="Base seed (default: current time)")
    parser.add_argument("--out-dir", default="metrics_output")
    parser.add_argument("--no-charts", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    seed_base = args.seed if args.seed is not None else int(time.time())
    all_rows = []
    for i in range(args.runs):
        seed = seed_base + i
        for algo in args.algorithms:
            all_rows.append(run_single(args.size, algo, args.wall_probability, seed))
        logger.info("maze %d/%d done (seed %d)", i + 1, args.runs, seed)

    os.makedirs(args.out_dir, exist_ok=True)
    write_csv(os.path.join(args.out_dir, "raw_results.csv"), all_rows)
    summary = aggregate_results(all_rows)
    write_csv(os.path.join(args.out_dir, "summary.csv"), summary)

    if not args.no_charts:
        for metric in ["elapsed_ms_avg", "nodes_visited_avg", "path_length_avg", "finished_rate"]:
            plot_metric(summary, metric, os.path.join(args.out_dir, f"{metric}.png"))

    for row in summary:
        print(f"{row['algorithm']:>4}: visited {row['nodes_visited_avg']:.1f}, "
              f"path {row['path_length_avg']:.1f}, solved {row['finished_rate']:.0%}")
    print(f"Wrote results to {args.out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
