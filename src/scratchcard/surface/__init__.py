"""
Cover layer model and render-surface seam.

Exposes:
- CoverageTracker: authoritative erased-area model of the cover.
- CoverageState: snapshot of total and erased area.
- RenderSurface: interface the presentation layer implements.
- NullSurface: headless surface that only records calls.
"""
from .coverage import CoverageState, CoverageTracker
from .render import NullSurface, RenderSurface

__all__ = [
    "CoverageState",
    "CoverageTracker",
    "NullSurface",
    "RenderSurface",
]
