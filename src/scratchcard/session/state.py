from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..economy.wallet import Wallet


class SessionState(Enum):
    """Lifecycle of the current card within a session."""

    AWAITING_WAGER = "awaiting_wager"
    SCRATCHING = "scratching"
    RESOLVED = "resolved"
    SESSION_COMPLETE = "session_complete"


@dataclass
class Session:
    """Mutable play-session record owned by exactly one SessionController.

    Money lives in the wallet; this record adds the card counters and the
    prize waiting to be collected for the current card.
    """

    wallet: Wallet
    cards_remaining: int
    current_card_index: int = 1
    state: SessionState = SessionState.AWAITING_WAGER
    pending_prize: Optional[int] = None

    @property
    def balance(self) -> int:
        return self.wallet.balance

    @property
    def total_earned(self) -> int:
        return self.wallet.total_earned

    @property
    def active(self) -> bool:
        return self.state is SessionState.SCRATCHING
