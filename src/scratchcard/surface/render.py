from __future__ import annotations

import abc
import logging
from typing import List, Tuple

logger = logging.getLogger(__name__)


class RenderSurface(abc.ABC):
    """Abstract drawing target for the cover layer.

    Implementations only draw; the coverage percentage is always taken from
    CoverageTracker, never read back from rendered pixels.
    """

    @abc.abstractmethod
    def erase(self, x: float, y: float, radius: float) -> None:
        """Cut a circular hole in the cover at surface coordinates."""

    @abc.abstractmethod
    def clear_all(self) -> None:
        """Remove the whole cover."""

    @abc.abstractmethod
    def reset(self, width: int, height: int) -> None:
        """Redraw a full, opaque cover at the given backing size."""


class NullSurface(RenderSurface):
    """Headless surface that records what it was asked to draw."""

    def __init__(self) -> None:
        self.strokes: List[Tuple[float, float, float]] = []
        self.cleared: bool = False
        self.size: Tuple[int, int] = (0, 0)
        self.resets: int = 0

    def erase(self, x: float, y: float, radius: float) -> None:
        self.strokes.append((x, y, radius))

    def clear_all(self) -> None:
        self.cleared = True

    def reset(self, width: int, height: int) -> None:
        self.strokes.clear()
        self.cleared = False
        self.size = (width, height)
        self.resets += 1
        logger.debug("NullSurface reset to %dx%d", width, height)


__all__ = ["RenderSurface", "NullSurface"]
