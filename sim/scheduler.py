#!/usr/bin/env python3
"""
sim/scheduler.py
================
"Run this callback on the next frame" capability used by the engine.

The engine requests exactly one frame at the end of each tick, so a
scheduler never has to run two ticks of the same run concurrently.
Two implementations are provided:

* :class:`FrameQueueScheduler`: pumped by a render loop (the pygame
  view calls :meth:`~FrameQueueScheduler.run_pending` once per frame).
* :class:`ThreadedFrameScheduler`: a daemon thread sleeping until the
  next frame, for headless runs.
"""

from __future__ import annotations

import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

import config

log = logging.getLogger("scheduler")

FrameCallback = Callable[[], None]


class FrameHandle:
    """Cancellable token for one requested frame."""

    __slots__ = ("callback", "cancelled")

    def __init__(self, callback: FrameCallback) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FrameScheduler(ABC):
    """Interface consumed by :class:`~sim.engine.SimulationEngine`."""

    @abstractmethod
    def schedule(self, callback: FrameCallback) -> FrameHandle:
        """Request *callback* to run once on the next frame."""


class FrameQueueScheduler(FrameScheduler):
    """Frame queue drained by the owner's render loop.

    Callbacks requested while :meth:`run_pending` is draining are kept
    for the following frame, mirroring ``requestAnimationFrame``.
    """

    def __init__(self) -> None:
        self._pending: List[FrameHandle] = []

    def schedule(self, callback: FrameCallback) -> FrameHandle:
        handle = FrameHandle(callback)
        self._pending.append(handle)
        return handle

    def pending(self) -> int:
        return sum(1 for h in self._pending if not h.cancelled)

    def run_pending(self) -> int:
        """Run every callback requested before this frame; returns how many ran."""
        due = self._pending
        self._pending = []
        ran = 0
        for handle in due:
            if handle.cancelled:
                continue
            handle.callback()
            ran += 1
        return ran


class ThreadedFrameScheduler(FrameScheduler):
    """Background thread that runs due callbacks every ``interval_s``.

    Parameters
    ----------
    interval_s : float
        Nominal frame period (defaults to ``config.UPDATE_INTERVAL_MS``).
    lock : lock-like or None
        Held while callbacks run so control calls from other threads
        never interleave with a tick.
    on_error : callable or None
        Called on the frame thread with the exception a callback raised.
    """

    def __init__(
        self,
        interval_s: Optional[float] = None,
        lock=None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self._interval_s = (
            interval_s if interval_s is not None else config.UPDATE_INTERVAL_MS / 1000.0
        )
        self._lock = lock
        self.on_error = on_error
        self._queue = FrameQueueScheduler()
        self._queue_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._running = False

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the frame thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="FrameScheduler"
        )
        self._thread.start()
        log.info("frame scheduler started at %.1f ms", self._interval_s * 1000.0)

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to join."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
        log.info("frame scheduler stopped")

    def schedule(self, callback: FrameCallback) -> FrameHandle:
        with self._queue_lock:
            return self._queue.schedule(callback)

    # ── Background loop ───────────────────────────────────────────────────────

    def _run_frame(self) -> None:
        with self._queue_lock:
            due = self._queue
            self._queue = FrameQueueScheduler()
        if self._lock is not None:
            with self._lock:
                due.run_pending()
        else:
            due.run_pending()

    def _loop(self) -> None:
        while self._running:
            t0 = time.perf_counter()
            try:
                self._run_frame()
            except Exception as e:
                log.exception("frame callback error")
                if self.on_error is not None:
                    self.on_error(e)
            time.sleep(max(0.0, self._interval_s - (time.perf_counter() - t0)))
