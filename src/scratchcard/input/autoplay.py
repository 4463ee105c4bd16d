from __future__ import annotations

import logging
from typing import Iterator

from .gesture import PointerSample
from .viewport import SurfaceViewport

logger = logging.getLogger(__name__)


class AutoScratcher:
    """Produces a boustrophedon drag across the displayed surface.

    Rows are spaced by the brush diameter so a full pass erases nearly all of
    the cover. Used by the headless runner in place of a human player.
    """

    def __init__(self, viewport: SurfaceViewport, brush_radius: float, step: float | None = None) -> None:
        self.viewport = viewport
        self.brush_radius = brush_radius
        self.step = step or brush_radius

    def samples(self) -> Iterator[PointerSample]:
        vp = self.viewport
        if vp.display_width <= 0 or vp.display_height <= 0:
            return
        y = vp.top + self.brush_radius / 2
        leftward = False
        while y < vp.top + vp.display_height + self.brush_radius:
            xs = self._row(vp.left, vp.left + vp.display_width)
            for x in (reversed(xs) if leftward else xs):
                yield PointerSample(x, min(y, vp.top + vp.display_height - 1), True, source="autoplay")
            leftward = not leftward
            y += self.brush_radius
        yield PointerSample(vp.left, vp.top, False, source="autoplay")

    def _row(self, start: float, end: float) -> list[float]:
        xs = []
        x = start
        while x < end:
            xs.append(x)
            x += self.step
        xs.append(end - 1)
        return xs
