from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..events import CardRevealedEvent
from ..session.controller import SessionController
from ..session.state import SessionState
from .viewport import SurfaceViewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointerSample:
    """A backend-agnostic input sample in client coordinates.

    Attributes:
        x, y: Client-space position.
        pressed: True while the button is held or the finger is down.
        source: Optional device label ("mouse", "touch", "autoplay").
    """

    x: float
    y: float
    pressed: bool
    source: Optional[str] = None


@dataclass(frozen=True)
class TouchPoint:
    x: float
    y: float


class GestureRouter:
    """Routes pointer and touch input to erase strokes on the session.

    Strokes are only forwarded while a press is active and the session is
    scratching; late or duplicate events outside that window are dropped.
    For multi-touch, only the first touch point is followed.

    Usage:
        router = GestureRouter(controller, SurfaceViewport(0, 0, 320, 240, 640, 480))
        router.press(10, 10)
        router.move(40, 12)
        router.release()
    """

    def __init__(self, controller: SessionController, viewport: SurfaceViewport, brush_radius: Optional[float] = None) -> None:
        self.controller = controller
        self.viewport = viewport
        self.brush_radius = brush_radius if brush_radius is not None else controller.config.brush_radius
        self._pressing = False
        # A drag ends with the card; the next card needs a fresh press.
        controller.event_bus.subscribe(CardRevealedEvent, self._on_card_revealed)

    @property
    def pressing(self) -> bool:
        return self._pressing

    @property
    def surface_radius(self) -> float:
        """Brush radius converted to backing pixels."""
        return self.brush_radius * max(self.viewport.scale_x, self.viewport.scale_y)

    def update_viewport(self, viewport: SurfaceViewport) -> None:
        logger.debug("Viewport updated: %s", viewport)
        self.viewport = viewport

    def should_suppress_default(self) -> bool:
        """Whether the host should block scrolling/context menus right now."""
        return self.controller.state is SessionState.SCRATCHING

    # ---------- Mouse-style input ----------
    def press(self, client_x: float, client_y: float) -> bool:
        if self.controller.state is not SessionState.SCRATCHING:
            return False
        self._pressing = True
        return self._stroke(client_x, client_y)

    def move(self, client_x: float, client_y: float) -> bool:
        if not self._pressing:
            return False
        return self._stroke(client_x, client_y)

    def release(self) -> None:
        self._pressing = False

    def _on_card_revealed(self, event: CardRevealedEvent) -> None:
        self.release()

    # ---------- Touch input ----------
    def touch_start(self, touches: Sequence[TouchPoint]) -> bool:
        if not touches:
            return False
        return self.press(touches[0].x, touches[0].y)

    def touch_move(self, touches: Sequence[TouchPoint]) -> bool:
        if not touches:
            return False
        return self.move(touches[0].x, touches[0].y)

    def touch_end(self) -> None:
        self.release()

    # ---------- Generic samples ----------
    def feed(self, sample: PointerSample) -> bool:
        """Dispatch a normalized sample to press/move/release."""
        if not sample.pressed:
            self.release()
            return False
        if self._pressing:
            return self.move(sample.x, sample.y)
        return self.press(sample.x, sample.y)

    def _stroke(self, client_x: float, client_y: float) -> bool:
        if self.controller.state is not SessionState.SCRATCHING:
            return False
        x, y = self.viewport.to_surface(client_x, client_y)
        return self.controller.scratch(x, y, self.surface_radius)


__all__ = ["GestureRouter", "PointerSample", "TouchPoint"]
