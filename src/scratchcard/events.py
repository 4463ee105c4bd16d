import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, FrozenSet, List, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EventBus:
    """Synchronous publish/subscribe hub between the session and its views.

    Handlers register for an event class and receive every emitted instance
    of it, subclasses included, in subscription order. Delivery happens on
    the emitting call, so a view sees a state change before the controller
    method that caused it returns.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._handlers: Dict[Type[Any], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)  # type: ignore[arg-type]

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        """Drop a handler; unknown handlers are ignored."""
        with self._lock:
            registered = self._handlers.get(event_type)
            if not registered or handler not in registered:
                return
            registered.remove(handler)
            if not registered:
                del self._handlers[event_type]

    def _handlers_for(self, event: Any) -> List[Callable[[Any], None]]:
        with self._lock:
            return [
                handler
                for event_type, registered in self._handlers.items()
                if isinstance(event, event_type)
                for handler in registered
            ]

    def emit(self, event: Any) -> None:
        logger.debug("Emitting %s", event)
        for handler in self._handlers_for(event):
            handler(event)


@dataclass(frozen=True)
class BalanceChangedEvent:
    balance: int
    total_earned: int
    reason: str  # "wager", "prize"


@dataclass(frozen=True)
class CardStartedEvent:
    card_index: int
    cards_total: int
    balance: int


@dataclass(frozen=True)
class CardRevealedEvent:
    card_index: int
    won: bool
    value: int
    winning_cells: FrozenSet[int]


@dataclass(frozen=True)
class PrizeAnnouncedEvent:
    """Delayed popup notification, fired after the reveal delay elapses."""

    card_index: int
    won: bool
    value: int


@dataclass(frozen=True)
class WagerRejectedEvent:
    balance: int
    cost: int
    message: str


@dataclass(frozen=True)
class SessionCompletedEvent:
    total_earned: int
    final_balance: int
