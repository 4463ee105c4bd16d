import logging
from dataclasses import dataclass

from ..events import BalanceChangedEvent, EventBus
from ..exceptions import InsufficientFunds

logger = logging.getLogger(__name__)


@dataclass
class Wallet:
    """Player balance plus the running total of prizes collected.

    Emits BalanceChangedEvent on every state change via the provided EventBus.
    Prizes go to ``total_earned`` (redeemable at session end); wagers come
    out of ``balance``.
    """

    event_bus: EventBus
    _balance: int = 0
    _total_earned: int = 0

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def total_earned(self) -> int:
        return self._total_earned

    def can_afford(self, cost: int) -> bool:
        if cost < 0:
            return False
        return self._balance >= cost

    def spend(self, amount: int, reason: str = "wager") -> int:
        if amount < 0:
            raise ValueError("Cannot spend a negative amount")
        if not self.can_afford(amount):
            raise InsufficientFunds(self._balance, amount)
        old = self._balance
        self._balance = old - amount
        logger.debug("Balance spent: -%s (reason=%s); old=%s new=%s", amount, reason, old, self._balance)
        self._notify(reason)
        return amount

    def credit_prize(self, amount: int, reason: str = "prize") -> int:
        if amount < 0:
            raise ValueError("Cannot credit a negative prize")
        old = self._total_earned
        self._total_earned = old + amount
        logger.debug("Prize credited: +%s (reason=%s); old=%s new=%s", amount, reason, old, self._total_earned)
        self._notify(reason)
        return amount

    def _notify(self, reason: str) -> None:
        self.event_bus.emit(
            BalanceChangedEvent(balance=self._balance, total_earned=self._total_earned, reason=reason)
        )
