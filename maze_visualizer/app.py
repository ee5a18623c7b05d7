import logging
import tkinter as tk
from tkinter import ttk

from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

from maze_visualizer.config import (
    ALGORITHMS, BG_COLOR, CELL_SIZE, DEFAULT_GRID_SIZE, EMPTY_COLOR, EXPLORED_COLOR, GOAL_COLOR,
    GRID_LINE_COLOR, GRID_SIZES, MAX_DELAY_MS, MIN_DELAY_MS, PATH_COLOR, START_COLOR, WALL_COLOR,
    RunConfig,
)
from maze_visualizer.controller import RunController
from maze_visualizer.grid import CellKind, Grid, Position
from maze_visualizer.metrics import DASHBOARD_METRICS, best_algorithm, draw_metric, performance_rows
from maze_visualizer.scheduler import AnimationScheduler

logger = logging.getLogger(__name__)

CELL_COLORS = {
    CellKind.EMPTY: EMPTY_COLOR,
    CellKind.WALL: WALL_COLOR,
    CellKind.START: START_COLOR,
    CellKind.GOAL: GOAL_COLOR,
    CellKind.EXPLORED: EXPLORED_COLOR,
    CellKind.PATH: PATH_COLOR,
}


class MazeApp:
    """
    Tkinter front end for the pathfinding engine.

    Architecture:
      - One canvas of N x N rectangles, redrawn per cell from each Frame's
        overlay diff and fully on grid edits.
      - The AnimationScheduler runs on root.after/after_cancel, so the engine
        paces itself inside the Tk event loop.
      - Click-and-drag draws walls; each drag paints the state of the first
        cell touched.
      - "Compare" opens a window charting the latest result per algorithm.
    """
    def __init__(self, root):
        self.root = root
        self.root.title("Maze Pathfinding Visualizer")
        self.root.configure(bg=BG_COLOR)
        self.root.resizable(False, False)

        self.size_var = tk.IntVar(value=DEFAULT_GRID_SIZE)
        self.algorithm_var = tk.StringVar(value=ALGORITHMS[0])
        self.speed_var = tk.IntVar(value=RunConfig().delay_ms)
        self.show_explored_var = tk.BooleanVar(value=True)
        self.stats_var = tk.StringVar(value="")

        scheduler = AnimationScheduler(root.after, root.after_cancel)
        self.controller = RunController(Grid(DEFAULT_GRID_SIZE), scheduler)
        self.controller.on_frame = self.on_frame
        self.controller.on_finish = self.on_finish
        self.controller.on_result = self.on_result

        self._drag_paint = None
        self.rects = {}
        self.results_window = None

        self._setup_ui()
        self.draw_all()

    def _setup_ui(self):
        style = ttk.Style(); style.configure("TButton", padding=6, relief="flat")
        style.configure("TLabel", background=BG_COLOR, foreground="white")
        style.configure("TCheckbutton", background=BG_COLOR, foreground="white")
        style.configure("TScale", background=BG_COLOR)

        controls = tk.Frame(self.root, bg=BG_COLOR, padx=10, pady=5); controls.pack(side=tk.TOP, fill=tk.X)
        buttons = tk.Frame(self.root, bg=BG_COLOR, padx=10, pady=5); buttons.pack(side=tk.TOP, fill=tk.X)
        maze_frame = tk.Frame(self.root, bg=BG_COLOR, padx=10, pady=10); maze_frame.pack(side=tk.TOP)

        ttk.Label(controls, text="Grid:").pack(side=tk.LEFT, padx=(0, 5))
        self.size_combo = ttk.Combobox(controls, textvariable=self.size_var, values=GRID_SIZES, state="readonly", width=5)
        self.size_combo.pack(side=tk.LEFT); self.size_combo.bind("<<ComboboxSelected>>", self.on_size_change)
        ttk.Label(controls, text="Algorithm:").pack(side=tk.LEFT, padx=(10, 5))
        self.algo_combo = ttk.Combobox(controls, textvariable=self.algorithm_var, values=ALGORITHMS, state="readonly", width=6)
        self.algo_combo.pack(side=tk.LEFT); self.algo_combo.bind("<<ComboboxSelected>>", self.on_algo_change)
        ttk.Label(controls, text="Delay (ms):").pack(side=tk.LEFT, padx=(10, 5))
        ttk.Scale(controls, from_=MIN_DELAY_MS, to=MAX_DELAY_MS, orient=tk.HORIZONTAL, variable=self.speed_var,
                  command=self.on_speed_change).pack(side=tk.LEFT, fill=tk.X, expand=True)
        ttk.Checkbutton(controls, text="Show explored", variable=self.show_explored_var,
                        command=self.on_show_explored_change).pack(side=tk.LEFT, padx=10)

        self.generate_btn = ttk.Button(buttons, text="Generate Maze", command=self.generate_maze); self.generate_btn.pack(side=tk.LEFT, padx=5)
        self.start_btn = ttk.Button(buttons, text="Start Search", command=self.start_search); self.start_btn.pack(side=tk.LEFT, padx=5)
        self.pause_btn = ttk.Button(buttons, text="Pause", command=self.toggle_pause, state=tk.DISABLED); self.pause_btn.pack(side=tk.LEFT, padx=5)
        ttk.Button(buttons, text="Reset", command=self.reset).pack(side=tk.LEFT, padx=5)
        ttk.Button(buttons, text="Compare", command=self.show_results).pack(side=tk.LEFT, padx=5)
        ttk.Label(buttons, textvariable=self.stats_var, width=70, anchor=tk.E).pack(side=tk.RIGHT)

        canvas_size = CELL_SIZE * max(GRID_SIZES)
        self.canvas = tk.Canvas(maze_frame, width=canvas_size, height=canvas_size, bg=BG_COLOR, highlightthickness=0)
        self.canvas.pack()
        self.canvas.bind("<ButtonPress-1>", self.on_press)
        self.canvas.bind("<B1-Motion>", self.on_drag)
        self.canvas.bind("<ButtonRelease-1>", lambda e: setattr(self, "_drag_paint", None))

    # --- UI Event Handlers ---
    def on_size_change(self, event=None):
        if not self.controller.set_grid_size(int(self.size_var.get())):
            self.size_var.set(self.controller.grid.size)
        self.draw_all()

    def on_algo_change(self, event=None):
        if not self.controller.set_algorithm(self.algorithm_var.get()):
            self.algorithm_var.set(self.controller.config.algorithm)

    def on_speed_change(self, value):
        self.controller.set_delay(float(value))

    def on_show_explored_change(self):
        self.controller.set_show_explored(self.show_explored_var.get())
        self.draw_all()

    def _cell_at(self, event):
        size = self.controller.grid.size
        pos = Position(event.y // self._cell_px(), event.x // self._cell_px())
        return pos if 0 <= pos.row < size and 0 <= pos.col < size else None

    def on_press(self, event):
        pos = self._cell_at(event)
        if pos is None or self.controller.is_running:
            return
        if self.controller.toggle_wall(pos):
            self._drag_paint = pos in self.controller.grid.walls
            self.draw_cell(pos)

    def on_drag(self, event):
        pos = self._cell_at(event)
        if pos is None or self._drag_paint is None or self.controller.is_running:
            return
        if self.controller.grid.set_wall(pos, self._drag_paint):
            self.draw_cell(pos)

    def generate_maze(self):
        if self.controller.generate_random():
            self.draw_all()

    def start_search(self):
        self.controller.set_algorithm(self.algorithm_var.get())
        if self.controller.start():
            self.draw_all()
            self._set_running_ui(True)

    def toggle_pause(self):
        self.controller.toggle_pause()
        self.pause_btn.configure(text="Resume" if self.controller.is_paused else "Pause")

    def reset(self):
        self.controller.reset()
        self._set_running_ui(False)
        self.draw_all()

    def _set_running_ui(self, running):
        state = tk.DISABLED if running else tk.NORMAL
        for widget in (self.generate_btn, self.start_btn):
            widget.configure(state=state)
        self.size_combo.configure(state="disabled" if running else "readonly")
        self.algo_combo.configure(state="disabled" if running else "readonly")
        self.pause_btn.configure(state=tk.NORMAL if running else tk.DISABLED, text="Pause")
        self._update_stats_label()

    # --- Engine callbacks ---
    def on_frame(self, frame):
        for pos in frame.changes:
            self.draw_cell(pos)
        self.stats_var.set(frame.stats.describe())

    def on_finish(self, stats):
        self._set_running_ui(False)
        self.stats_var.set(stats.describe())

    def on_result(self, result):
        logger.info("result recorded: %s", result)
        if self.results_window is not None and self.results_window.winfo_exists():
            self._render_results()

    # --- Drawing ---
    def _cell_px(self):
        return (CELL_SIZE * max(GRID_SIZES)) // self.controller.grid.size

    def _update_stats_label(self):
        self.stats_var.set(self.controller.stats_snapshot().describe())

    def draw_all(self):
        self.canvas.delete("all")
        self.rects = {}
        grid = self.controller.grid
        px = self._cell_px()
        for row in range(grid.size):
            for col in range(grid.size):
                x1, y1 = col * px, row * px
                self.rects[(row, col)] = self.canvas.create_rectangle(
                    x1, y1, x1 + px, y1 + px, fill=self._color((row, col)), outline=GRID_LINE_COLOR)
        self._update_stats_label()

    def draw_cell(self, pos):
        rect = self.rects.get(tuple(pos))
        if rect is not None:
            self.canvas.itemconfigure(rect, fill=self._color(pos))

    def _color(self, pos):
        kind = self.controller.grid.kind_at(pos)
        if kind is CellKind.EXPLORED and not self.controller.config.show_explored:
            kind = CellKind.EMPTY
        return CELL_COLORS[kind]

    # --- Comparison window ---
    def show_results(self):
        if self.results_window is not None and self.results_window.winfo_exists():
            self.results_window.lift()
            self._render_results()
            return
        self.results_window = tk.Toplevel(self.root)
        self.results_window.title("Performance Comparison")
        self.metric_var = tk.StringVar(value=DASHBOARD_METRICS[0])
        top = ttk.Frame(self.results_window); top.pack(side=tk.TOP, fill=tk.X, padx=8, pady=6)
        ttk.Label(top, text="Metric:").pack(side=tk.LEFT)
        combo = ttk.Combobox(top, textvariable=self.metric_var, values=DASHBOARD_METRICS, state="readonly", width=14)
        combo.pack(side=tk.LEFT, padx=6); combo.bind("<<ComboboxSelected>>", lambda e: self._render_results())
        self.best_var = tk.StringVar(value="")
        ttk.Label(top, textvariable=self.best_var).pack(side=tk.LEFT, padx=12)

        fig = Figure(figsize=(6, 4), dpi=100)
        self.results_ax = fig.add_subplot(111)
        self.results_canvas = FigureCanvasTkAgg(fig, master=self.results_window)
        self.results_canvas.get_tk_widget().pack(fill=tk.BOTH, expand=True)
        self._render_results()

    def _render_results(self):
        rows = performance_rows(self.controller.history)
        metric = self.metric_var.get()
        if not rows:
            self.results_ax.clear()
            self.results_ax.text(0.5, 0.5, "Run the algorithms to see a comparison", ha="center", va="center")
            self.results_ax.set_axis_off()
            self.best_var.set("")
        else:
            self.results_ax.set_axis_on()
            draw_metric(self.results_ax, rows, metric)
            self.results_ax.set_title(f"{metric} by algorithm")
            self.best_var.set(f"Best: {best_algorithm(rows, metric)}")
        self.results_ax.figure.tight_layout()
        self.results_canvas.draw_idle()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    root = tk.Tk()
    MazeApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
