"""
Cooperative animation pacing on top of a tk-style timer.

The scheduler pulls one frame at a time from an iterator and then suspends for
the step delay by registering its next tick with after(ms, callback). This is
the same update_loop / root.after pattern the tkinter app uses, just
separated from the widgets so it runs headless with ManualTimer.

Pause is only looked at when a tick fires. A pause requested while a delay is
pending lets that delay finish and stops before pulling the next frame.
"""

import heapq
import itertools
import logging

from maze_visualizer.config import DEFAULT_DELAY_MS, clamp_delay

logger = logging.getLogger(__name__)


class AnimationScheduler:
    def __init__(self, after, after_cancel, delay_ms=DEFAULT_DELAY_MS):
        self._after = after
        self._after_cancel = after_cancel
        self.delay_ms = clamp_delay(delay_ms)
        self._frames = None
        self._pending = None
        self._paused = False
        self._parked = False
        self._on_frame = None
        self._on_done = None

    @property
    def is_active(self):
        return self._frames is not None

    @property
    def is_paused(self):
        return self._paused

    def set_delay(self, delay_ms):
        self.delay_ms = clamp_delay(delay_ms)

    def start(self, frames, on_frame=None, on_done=None):
        """Begin pulling frames. Rejected (returns False) while already active."""
        if self.is_active:
            return False
        self._frames = iter(frames)
        self._on_frame = on_frame
        self._on_done = on_done
        self._paused = False
        self._parked = False
        logger.debug("scheduler started (delay %sms)", self.delay_ms)
        self._schedule(0)
        return True

    def pause(self):
        if self.is_active:
            self._paused = True

    def resume(self):
        if not self._paused:
            return
        self._paused = False
        if self._parked and self.is_active:
            self._parked = False
            self._schedule(0)

    def cancel(self):
        """Stop immediately, discarding the frame iterator and any pending tick.

        May be called from inside the iterator itself; it is then dropped
        without being closed and never resumed.
        """
        if self._pending is not None:
            self._after_cancel(self._pending)
            self._pending = None
        frames, self._frames = self._frames, None
        if frames is not None:
            if not getattr(frames, "gi_running", False):
                close = getattr(frames, "close", None)
                if close is not None:
                    close()
            logger.debug("scheduler cancelled")
        self._paused = False
        self._parked = False
        self._on_frame = None
        self._on_done = None

    def _schedule(self, delay):
        self._pending = self._after(max(0, int(delay)), self._tick)

    def _tick(self):
        self._pending = None
        frames = self._frames
        if frames is None:
            return
        if self._paused:
            self._parked = True
            return

        try:
            frame = next(frames)
        except StopIteration:
            if self._frames is not frames:
                return
            on_done = self._on_done
            self._frames = None
            self._on_frame = None
            self._on_done = None
            logger.debug("scheduler finished")
            if on_done is not None:
                on_done()
            return

        if self._frames is frames and self._on_frame is not None:
            self._on_frame(frame)
        # on_frame may have cancelled us, or cancelled and started again
        if self._frames is frames and self._pending is None:
            factor = getattr(frame, "delay_factor", 1.0)
            self._schedule(self.delay_ms * factor)


class ManualTimer:
    """
    Headless stand-in for tk's after/after_cancel.

    Callbacks run only when advance() or run_until_idle() is called, in order
    of due time then registration. The virtual clock (seconds) can be handed
    to StatsCollector so elapsed times include the simulated delays.
    """
    def __init__(self):
        self.now_ms = 0
        self._queue = []
        self._ids = itertools.count(1)
        self._cancelled = set()

    def clock(self):
        return self.now_ms / 1000.0

    def after(self, ms, callback):
        timer_id = next(self._ids)
        heapq.heappush(self._queue, (self.now_ms + ms, timer_id, callback))
        return timer_id

    def after_cancel(self, timer_id):
        self._cancelled.add(timer_id)

    @property
    def pending(self):
        return sum(1 for _, timer_id, _ in self._queue if timer_id not in self._cancelled)

    def advance(self, ms):
        """Move the clock forward by ms, firing everything that falls due."""
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due, timer_id, callback = heapq.heappop(self._queue)
            if timer_id in self._cancelled:
                self._cancelled.discard(timer_id)
                continue
            self.now_ms = due
            callback()
        self.now_ms = target

    def run_until_idle(self, limit=1_000_000):
        fired = 0
        while self._queue:
            due, timer_id, callback = heapq.heappop(self._queue)
            if timer_id in self._cancelled:
                self._cancelled.discard(timer_id)
                continue
            self.now_ms = max(self.now_ms, due)
            callback()
            fired += 1
            if fired >= limit:
                raise RuntimeError(f"timer still busy after {limit} callbacks")
        return fired
