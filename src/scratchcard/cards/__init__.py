"""
Card dealing and judging.

Exposes:
- Symbol / Grid: immutable card contents.
- SymbolSetGenerator: deals a grid with exactly one winning triple.
- OutcomeEvaluator / Outcome: judges a revealed grid.
"""
from .symbols import DEFAULT_CATALOG, GRID_SIZE, Grid, Symbol
from .generator import FillerPolicy, SymbolSetGenerator
from .evaluator import Outcome, OutcomeEvaluator

__all__ = [
    "DEFAULT_CATALOG",
    "GRID_SIZE",
    "Grid",
    "Symbol",
    "FillerPolicy",
    "SymbolSetGenerator",
    "Outcome",
    "OutcomeEvaluator",
]
