from __future__ import annotations

import logging
import math
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_COVERED = 0
_ERASED = 1


@dataclass(frozen=True)
class CoverageState:
    total_area: int
    erased_area: int

    @property
    def percent(self) -> float:
        if self.total_area <= 0:
            return 0.0
        return self.erased_area * 100 / self.total_area


class CoverageTracker:
    """Tracks how much of the cover layer has been scratched away.

    The surface is a one-byte-per-pixel mask in backing-resolution pixels. A
    pixel counts as erased once its centre falls inside any erase stroke, so
    overlapping strokes never double-count. The percentage is always taken
    from a rescan of the mask rather than a running total; the rescan result
    is cached until the mask changes again.

    A surface with zero width or height (not yet laid out) ignores strokes and
    reports 0% coverage.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self._allocate(width, height)

    def _allocate(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(f"Surface size must be non-negative, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._mask = bytearray(self.width * self.height)
        self._erased = 0
        self._dirty = False

    @property
    def total_area(self) -> int:
        return self.width * self.height

    # ---------- Mutation ----------
    def erase(self, x: float, y: float, radius: float) -> None:
        """Erase a disc of ``radius`` pixels centred on surface point (x, y)."""
        if self.total_area == 0 or radius <= 0:
            return
        r2 = radius * radius
        top = max(0, math.floor(y - radius))
        bottom = min(self.height - 1, math.ceil(y + radius))
        for py in range(top, bottom + 1):
            dy = py + 0.5 - y
            rem = r2 - dy * dy
            if rem < 0:
                continue
            half = math.sqrt(rem)
            x0 = max(0, math.ceil(x - half - 0.5))
            x1 = min(self.width - 1, math.floor(x + half - 0.5))
            self._fill_row(py, x0, x1)

    def erase_rect(self, x: int, y: int, width: int, height: int) -> None:
        """Erase an axis-aligned rectangle, clipped to the surface."""
        if self.total_area == 0 or width <= 0 or height <= 0:
            return
        x0 = max(0, int(x))
        x1 = min(self.width - 1, int(x) + int(width) - 1)
        for py in range(max(0, int(y)), min(self.height, int(y) + int(height))):
            self._fill_row(py, x0, x1)

    def clear_all(self) -> None:
        """Erase the whole surface (full reveal)."""
        if self.total_area == 0:
            return
        self._mask[:] = bytes([_ERASED]) * self.total_area
        self._dirty = True

    def _fill_row(self, py: int, x0: int, x1: int) -> None:
        if x1 < x0:
            return
        start = py * self.width + x0
        span = x1 - x0 + 1
        self._mask[start:start + span] = bytes([_ERASED]) * span
        self._dirty = True

    def reset(self) -> None:
        """Cover the whole surface again."""
        self._allocate(self.width, self.height)

    def resize(self, width: int, height: int) -> None:
        """Replace the surface with a fully covered one of the new size."""
        logger.debug("Coverage surface resized %dx%d -> %dx%d", self.width, self.height, width, height)
        self._allocate(width, height)

    # ---------- Queries ----------
    @property
    def erased_area(self) -> int:
        if self._dirty:
            self._erased = self._mask.count(_ERASED)
            self._dirty = False
        return self._erased

    @property
    def state(self) -> CoverageState:
        return CoverageState(total_area=self.total_area, erased_area=self.erased_area)

    def coverage_percent(self) -> float:
        return self.state.percent

    def is_threshold_crossed(self, threshold: float) -> bool:
        return self.coverage_percent() >= threshold

    def is_erased(self, x: int, y: int) -> bool:
        if not (0 <= x < self.width and 0 <= y < self.height):
            return False
        return self._mask[y * self.width + x] == _ERASED
