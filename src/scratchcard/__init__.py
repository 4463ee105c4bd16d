"""
Scratch card game package root.

The gameplay core (coverage tracking, grid generation, outcome evaluation and
the session state machine) lives in plain Python modules with no rendering
dependencies. Arcade is only touched by ``scratchcard.ui``.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
