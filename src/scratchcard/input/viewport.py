from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class SurfaceViewport:
    """Where the cover is displayed and how big its backing store is.

    Attributes:
        left, top: Client-space position of the displayed surface's top-left corner.
        display_width, display_height: Displayed size in client units (CSS/logical pixels).
        backing_width, backing_height: Size of the cover mask in device pixels.

    Horizontal and vertical scales are independent; a stretched surface maps
    each axis separately.
    """

    left: float
    top: float
    display_width: float
    display_height: float
    backing_width: int
    backing_height: int

    @classmethod
    def identity(cls, width: int, height: int) -> "SurfaceViewport":
        return cls(0.0, 0.0, float(width), float(height), width, height)

    @property
    def scale_x(self) -> float:
        if self.display_width <= 0:
            return 0.0
        return self.backing_width / self.display_width

    @property
    def scale_y(self) -> float:
        if self.display_height <= 0:
            return 0.0
        return self.backing_height / self.display_height

    def to_surface(self, client_x: float, client_y: float) -> Tuple[float, float]:
        return (client_x - self.left) * self.scale_x, (client_y - self.top) * self.scale_y

    def contains(self, client_x: float, client_y: float) -> bool:
        return (
            self.left <= client_x < self.left + self.display_width
            and self.top <= client_y < self.top + self.display_height
        )
