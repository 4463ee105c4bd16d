from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .scheduler import Scheduler

logger = logging.getLogger(__name__)

FrameHook = Callable[[float], None]

# Frame time used when the loop runs unthrottled, so the prize delay still elapses.
NOMINAL_DT = 1.0 / 60.0


@dataclass
class EngineConfig:
    """Frame loop settings.

    Attributes:
        tick_rate: Frames per second to throttle to; 0 runs unthrottled.
        max_steps: Stop after this many frames (headless runs and tests).
    """

    tick_rate: float = 60.0
    max_steps: Optional[int] = None


class GameEngine:
    """Drives a session frame by frame.

    A frame advances the Scheduler first, so a due prize announcement lands
    before the hooks run; hooks then drain deferred recompute and resize
    requests and let a scripted player act. The Arcade window calls update()
    from on_update; headless runs call run().
    """

    def __init__(self, config: Optional[EngineConfig] = None, scheduler: Optional[Scheduler] = None) -> None:
        self.config = config or EngineConfig()
        self.scheduler = scheduler or Scheduler()
        self._hooks: List[FrameHook] = []
        self._running: bool = False
        self._step: int = 0
        self._last_time: Optional[float] = None

    @property
    def running(self) -> bool:
        return self._running

    @property
    def step(self) -> int:
        """Frames processed since the last start()."""
        return self._step

    def add_frame_hook(self, hook: FrameHook) -> None:
        self._hooks.append(hook)

    def start(self) -> None:
        if self._running:
            logger.debug("Engine already running; start() ignored")
            return
        self._running = True
        self._step = 0
        self._last_time = time.perf_counter()
        logger.info("Engine started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.info("Engine stopped after %s frames", self._step)

    def update(self, dt: float) -> None:
        """Process one frame of ``dt`` seconds; ignored unless started."""
        if not self._running:
            logger.debug("Frame dropped: engine not running")
            return
        self._step += 1
        self.scheduler.advance(dt)
        for hook in list(self._hooks):
            hook(dt)
        if self.config.max_steps is not None and self._step >= self.config.max_steps:
            self.stop()

    def _frame_time(self, now: float, throttled: bool) -> float:
        if not throttled or self._last_time is None:
            return NOMINAL_DT
        return now - self._last_time

    def run(self) -> None:
        """Block, producing frames until stop() or max_steps."""
        self.start()
        rate = self.config.tick_rate or 0.0
        frame_budget = 1.0 / rate if rate > 0 else 0.0

        while self._running:
            now = time.perf_counter()
            dt = self._frame_time(now, frame_budget > 0)
            self._last_time = now
            self.update(dt)
            if frame_budget > 0:
                spare = frame_budget - (time.perf_counter() - now)
                if spare > 0:
                    time.sleep(spare)

        logger.info("Loop complete (steps=%d)", self._step)
