from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, MutableSequence, Optional, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RNG:
    """
    Deterministic-friendly RNG wrapper around random.Random.

    Inject a fixed seed for reproducible grids in tests; leave it as None for
    a non-deterministic source during play.
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        if self.seed is not None:
            logger.debug("Initialized RNG with deterministic seed=%s", self.seed)

    def random(self) -> float:
        """Return the next random float in the range [0.0, 1.0)."""
        return self._rng.random()

    def randrange(self, n: int) -> int:
        """Return a random integer N such that 0 <= N < n."""
        return self._rng.randrange(n)

    def choice(self, seq: Sequence[Any]) -> Any:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self._rng.randrange(len(seq))]

    def shuffle(self, items: MutableSequence[Any]) -> None:
        """Fisher-Yates shuffle in place, walking from the last slot down."""
        for i in range(len(items) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            items[i], items[j] = items[j], items[i]

    def state(self):
        """Return the internal PRNG state for debugging."""
        return self._rng.getstate()

    def set_state(self, state) -> None:
        """Restore the internal PRNG state."""
        self._rng.setstate(state)
