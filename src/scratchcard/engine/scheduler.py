from __future__ import annotations

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class DeferredCall:
    """Handle for a callback scheduled to run after a delay."""

    def __init__(self, due: float, callback: Callable[[], None], label: str = "") -> None:
        self.due = due
        self.callback = callback
        self.label = label or getattr(callback, "__name__", "deferred")
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        if self.pending:
            self.cancelled = True
            logger.debug("Cancelled deferred call '%s'", self.label)

    def __repr__(self) -> str:
        return f"DeferredCall(label={self.label!r}, due={self.due:.3f}, pending={self.pending})"


class Scheduler:
    """Cooperative timer queue advanced by the frame tick.

    Nothing runs on its own: callbacks fire from advance() in due order, on
    the same thread that drives input. This keeps the presentation delay
    between reveal and prize popup cancellable and deterministic in tests.
    """

    def __init__(self) -> None:
        self._now: float = 0.0
        self._calls: List[DeferredCall] = []

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> List[DeferredCall]:
        return [c for c in self._calls if c.pending]

    def call_later(self, delay: float, callback: Callable[[], None], label: str = "") -> DeferredCall:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        call = DeferredCall(self._now + delay, callback, label)
        self._calls.append(call)
        logger.debug("Scheduled '%s' in %.3fs", call.label, delay)
        return call

    def advance(self, dt: float) -> int:
        """Move the clock forward by ``dt`` seconds and fire due callbacks.

        Returns the number of callbacks fired.
        """
        self._now += max(0.0, dt)
        due = sorted((c for c in self._calls if c.pending and c.due <= self._now), key=lambda c: c.due)
        fired = 0
        for call in due:
            # An earlier callback in this batch may have cancelled a later one.
            if not call.pending:
                continue
            call.fired = True
            fired += 1
            call.callback()
        self._calls = [c for c in self._calls if c.pending]
        return fired

    def cancel_all(self) -> None:
        for call in self._calls:
            call.cancel()
        self._calls.clear()


__all__ = ["DeferredCall", "Scheduler"]
