from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List

from .generator import WINNING_COUNT
from .symbols import Grid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Outcome:
    won: bool
    value: int
    winning_cells: FrozenSet[int] = field(default_factory=frozenset)


LOSS = Outcome(won=False, value=0)


class OutcomeEvaluator:
    """Judges a revealed grid: three cells sharing a value win that value.

    Pure: calling evaluate() repeatedly on the same grid gives the same result.
    If more than one value forms a triple, the value whose first cell comes
    earliest in the grid wins.
    """

    def evaluate(self, grid: Grid) -> Outcome:
        groups: Dict[int, List[int]] = {}
        for index, symbol in enumerate(grid.cells):
            groups.setdefault(symbol.value, []).append(index)

        for value, indices in groups.items():
            if len(indices) == WINNING_COUNT:
                logger.debug("Winning triple of %s at %s", value, indices)
                return Outcome(won=True, value=value, winning_cells=frozenset(indices))
        return LOSS
