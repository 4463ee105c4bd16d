from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.rng import RNG
from ..exceptions import DegenerateCatalog
from .symbols import DEFAULT_CATALOG, GRID_SIZE, Grid, Symbol

logger = logging.getLogger(__name__)

WINNING_COUNT = 3
MAX_FILLER_REPEATS = WINNING_COUNT - 1


class FillerPolicy(str, Enum):
    """How the six non-winning cells are drawn.

    CAPPED never lets a filler value reach three cells, so the dealt triple is
    the only one on the card. UNGUARDED draws freely with replacement and may
    produce an accidental secondary triple.
    """

    CAPPED = "capped"
    UNGUARDED = "unguarded"


class SymbolSetGenerator:
    """Deals one 3x3 grid per card with a guaranteed winning triple.

    Usage:
        gen = SymbolSetGenerator(DEFAULT_CATALOG, eligible_range=(50, 200), rng=RNG(7))
        grid = gen.generate()
        grid.winning_value  # -> 50, 100 or 200

    The catalog is validated on construction so a configuration that can
    never satisfy the grid guarantees fails before any card is dealt.
    """

    def __init__(
        self,
        catalog: Iterable[Symbol] = DEFAULT_CATALOG,
        eligible_range: Optional[Tuple[int, int]] = (50, 200),
        rng: Optional[RNG] = None,
        filler_policy: FillerPolicy | str = FillerPolicy.CAPPED,
    ) -> None:
        self.catalog: Tuple[Symbol, ...] = tuple(catalog)
        self.eligible_range = eligible_range
        self.rng = rng or RNG()
        self.filler_policy = FillerPolicy(filler_policy)
        self._validate()
        self.eligible_pool: Tuple[Symbol, ...] = self._eligible_pool()
        logger.debug(
            "Generator ready: %d symbols, eligible=%s, policy=%s",
            len(self.catalog),
            [s.value for s in self.eligible_pool],
            self.filler_policy.value,
        )

    # ---------- Validation ----------
    def _validate(self) -> None:
        values = [s.value for s in self.catalog]
        if len(set(values)) != len(values):
            raise DegenerateCatalog(f"Catalog values must be distinct, got {sorted(values)}")
        if any(v <= 0 for v in values):
            raise DegenerateCatalog("Catalog values must be positive")
        if self.eligible_range is not None:
            low, high = self.eligible_range
            if low > high:
                raise DegenerateCatalog(f"Eligible range is empty: [{low}, {high}]")
        if not self._eligible_pool():
            raise DegenerateCatalog(f"No catalog symbol falls in eligible range {self.eligible_range}")

        # Every eligible winner must leave enough distinct filler values behind.
        needed = self.min_filler_values(self.filler_policy)
        available = len(values) - 1
        if available < needed:
            raise DegenerateCatalog(
                f"Catalog leaves {available} filler value(s); policy {self.filler_policy.value!r} needs {needed}"
            )

    @staticmethod
    def min_filler_values(policy: FillerPolicy) -> int:
        if policy is FillerPolicy.CAPPED:
            filler_cells = GRID_SIZE - WINNING_COUNT
            return math.ceil(filler_cells / MAX_FILLER_REPEATS)
        return 2

    def _eligible_pool(self) -> Tuple[Symbol, ...]:
        if self.eligible_range is None:
            return self.catalog
        low, high = self.eligible_range
        return tuple(s for s in self.catalog if low <= s.value <= high)

    # ---------- Dealing ----------
    def generate(self) -> Grid:
        winner: Symbol = self.rng.choice(self.eligible_pool)
        cells: List[Symbol] = [winner] * WINNING_COUNT
        cells.extend(self._draw_fillers(winner))
        self.rng.shuffle(cells)
        grid = Grid(cells=tuple(cells), winning_value=winner.value)
        logger.debug("Dealt grid %s (winning value %s)", grid.values, winner.value)
        return grid

    def _draw_fillers(self, winner: Symbol) -> List[Symbol]:
        others: Sequence[Symbol] = [s for s in self.catalog if s.value != winner.value]
        drawn: List[Symbol] = []
        counts: dict[int, int] = {}
        while len(drawn) < GRID_SIZE - WINNING_COUNT:
            if self.filler_policy is FillerPolicy.CAPPED:
                pool = [s for s in others if counts.get(s.value, 0) < MAX_FILLER_REPEATS]
            else:
                pool = others
            pick: Symbol = self.rng.choice(pool)
            counts[pick.value] = counts.get(pick.value, 0) + 1
            drawn.append(pick)
        return drawn
