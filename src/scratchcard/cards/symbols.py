from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

GRID_SIZE = 9
GRID_COLUMNS = 3


@dataclass(frozen=True)
class Symbol:
    """A prize symbol printed on a card cell.

    Attributes:
        id: Opaque token identifying the symbol.
        value: Prize in whole currency units; always positive.
        image: Optional asset name used by presentation layers only.
    """

    id: str
    value: int
    image: Optional[str] = None


DEFAULT_CATALOG: Tuple[Symbol, ...] = (
    Symbol("1", 1, "images/1.png"),
    Symbol("2", 2, "images/2.png"),
    Symbol("5", 5, "images/5.jpg"),
    Symbol("10", 10, "images/10.png"),
    Symbol("20", 20, "images/20.png"),
    Symbol("50", 50, "images/50.png"),
    Symbol("100", 100, "images/100.png"),
    Symbol("200", 200, "images/200.jpg"),
    Symbol("500", 500, "images/500.png"),
)


@dataclass(frozen=True)
class Grid:
    """The nine cells of one card, row-major, plus the prize it was dealt with."""

    cells: Tuple[Symbol, ...]
    winning_value: int

    def __post_init__(self) -> None:
        if len(self.cells) != GRID_SIZE:
            raise ValueError(f"A grid needs exactly {GRID_SIZE} cells, got {len(self.cells)}")

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> Symbol:
        return self.cells[index]

    @property
    def values(self) -> Tuple[int, ...]:
        return tuple(s.value for s in self.cells)

    def value_counts(self) -> Dict[int, int]:
        return dict(Counter(self.values))

    def rows(self) -> Iterable[Tuple[Symbol, ...]]:
        for start in range(0, GRID_SIZE, GRID_COLUMNS):
            yield self.cells[start:start + GRID_COLUMNS]
