"""
Pointer input layer.

Exposes:
- PointerSample: a normalized (x, y, pressed) sample from mouse or touch.
- SurfaceViewport: maps client coordinates onto the cover's backing pixels.
- GestureRouter: turns samples into erase strokes on the session.
- AutoScratcher: scripted sample source used by the headless runner.
"""
from .gesture import GestureRouter, PointerSample, TouchPoint
from .viewport import SurfaceViewport
from .autoplay import AutoScratcher

__all__ = [
    "AutoScratcher",
    "GestureRouter",
    "PointerSample",
    "SurfaceViewport",
    "TouchPoint",
]
