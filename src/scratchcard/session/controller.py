from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..cards.evaluator import Outcome, OutcomeEvaluator
from ..cards.generator import SymbolSetGenerator
from ..cards.symbols import Grid
from ..config import GameConfig
from ..core.rng import RNG
from ..economy.wallet import Wallet
from ..engine.scheduler import DeferredCall, Scheduler
from ..events import (
    CardRevealedEvent,
    CardStartedEvent,
    EventBus,
    PrizeAnnouncedEvent,
    SessionCompletedEvent,
    WagerRejectedEvent,
)
from ..exceptions import InsufficientFunds, InvalidGestureState, InvalidSessionState
from ..surface.coverage import CoverageTracker
from ..surface.render import NullSurface, RenderSurface
from .state import Session, SessionState

logger = logging.getLogger(__name__)

INSUFFICIENT_FUNDS_MESSAGE = "Insufficient balance to play"


class SessionController:
    """Runs one play session: wagers, scratching, reveal, payout, next card.

    States:
        AWAITING_WAGER -> start_card() -> SCRATCHING
        SCRATCHING -> coverage threshold or reveal_all() -> RESOLVED
        RESOLVED -> collect_prize() -> AWAITING_WAGER | SCRATCHING | SESSION_COMPLETE

    The first card always needs an explicit start_card(). With
    ``config.auto_rewager`` the following cards are paid for and dealt as soon
    as the previous prize is collected, balance permitting.

    Everything happens synchronously on the caller's thread; the only delayed
    work is the prize announcement, scheduled on the Scheduler and cancelled
    when the card is collected or the controller is closed.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        event_bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
        rng: Optional[RNG] = None,
        generator: Optional[SymbolSetGenerator] = None,
        evaluator: Optional[OutcomeEvaluator] = None,
        surface: Optional[RenderSurface] = None,
    ) -> None:
        self.config = (config or GameConfig()).validate()
        self.event_bus = event_bus or EventBus()
        self.scheduler = scheduler or Scheduler()
        # Raises DegenerateCatalog before any card is dealt.
        self.generator = generator or SymbolSetGenerator(
            self.config.catalog,
            eligible_range=self.config.eligible_range,
            rng=rng or RNG(),
            filler_policy=self.config.filler_policy,
        )
        self.evaluator = evaluator or OutcomeEvaluator()
        self.surface = surface or NullSurface()

        wallet = Wallet(event_bus=self.event_bus, _balance=self.config.starting_balance)
        self.session = Session(wallet=wallet, cards_remaining=self.config.cards_per_session)
        self.tracker = CoverageTracker(self.config.surface.width, self.config.surface.height)
        self.surface.reset(self.tracker.width, self.tracker.height)

        self.grid: Optional[Grid] = None
        self.outcome: Optional[Outcome] = None
        self._announcement: Optional[DeferredCall] = None
        self._recompute_requested = False
        self._pending_size: Optional[Tuple[int, int]] = None
        self._closed = False
        logger.info(
            "Session created: balance=%s wager=%s cards=%s threshold=%.2f%%",
            self.session.balance,
            self.config.wager_cost,
            self.session.cards_remaining,
            self.config.reveal_threshold,
        )

    # ---------- Read-only views ----------
    @property
    def state(self) -> SessionState:
        return self.session.state

    @property
    def balance(self) -> int:
        return self.session.balance

    @property
    def total_earned(self) -> int:
        return self.session.total_earned

    @property
    def closed(self) -> bool:
        return self._closed

    def card_label(self) -> str:
        if self.session.cards_remaining > 0:
            return f"Card {self.session.current_card_index} of {self.config.cards_per_session}"
        return "All cards completed"

    # ---------- Wagering ----------
    def start_card(self) -> Grid:
        """Pay the wager and deal a fresh card.

        Raises:
            InsufficientFunds: balance below the wager; state is unchanged.
            InvalidSessionState: not waiting for a wager, or controller closed.
        """
        if self._closed:
            raise InvalidSessionState("Session controller is closed")
        if self.state is not SessionState.AWAITING_WAGER:
            raise InvalidSessionState(f"Cannot start a card while {self.state.value}")
        self._take_wager()
        return self._deal()

    def _take_wager(self) -> None:
        cost = self.config.wager_cost
        wallet = self.session.wallet
        if not wallet.can_afford(cost):
            logger.info("Wager rejected: balance=%s cost=%s", wallet.balance, cost)
            self.event_bus.emit(
                WagerRejectedEvent(balance=wallet.balance, cost=cost, message=INSUFFICIENT_FUNDS_MESSAGE)
            )
            raise InsufficientFunds(wallet.balance, cost)
        wallet.spend(cost, reason="wager")

    def _deal(self) -> Grid:
        self._cancel_announcement()
        if self._pending_size is not None:
            self._apply_resize()
        else:
            self._cover()
        self.grid = self.generator.generate()
        self.outcome = None
        self.session.pending_prize = None
        self.session.state = SessionState.SCRATCHING
        logger.info("%s dealt (balance=%s)", self.card_label(), self.balance)
        self.event_bus.emit(
            CardStartedEvent(
                card_index=self.session.current_card_index,
                cards_total=self.config.cards_per_session,
                balance=self.balance,
            )
        )
        return self.grid

    def _cover(self) -> None:
        self.tracker.reset()
        self.surface.reset(self.tracker.width, self.tracker.height)
        self._recompute_requested = False

    # ---------- Scratching ----------
    def _require_scratching(self, what: str) -> None:
        if self._closed:
            raise InvalidGestureState(f"{what} after session controller was closed")
        if self.state is not SessionState.SCRATCHING:
            raise InvalidGestureState(f"{what} while {self.state.value}")

    def scratch(self, x: float, y: float, radius: float) -> bool:
        """Apply one erase stroke at surface coordinates.

        Returns False (and changes nothing) when no card is being scratched.
        """
        try:
            self._require_scratching("erase")
        except InvalidGestureState as exc:
            logger.debug("Ignoring stroke at (%.1f, %.1f): %s", x, y, exc)
            return False
        self.tracker.erase(x, y, radius)
        self.surface.erase(x, y, radius)
        if self.config.recompute_per_frame:
            self._recompute_requested = True
        else:
            self._check_threshold()
        return True

    def reveal_all(self) -> bool:
        """Reveal the whole card at once, as if fully scratched."""
        try:
            self._require_scratching("reveal")
        except InvalidGestureState as exc:
            logger.debug("Ignoring reveal request: %s", exc)
            return False
        self._resolve()
        return True

    def _check_threshold(self) -> None:
        if self.tracker.is_threshold_crossed(self.config.reveal_threshold):
            logger.debug("Threshold crossed at %.2f%%", self.tracker.coverage_percent())
            self._resolve()

    def _resolve(self) -> None:
        self._require_scratching("resolve")
        assert self.grid is not None
        self.session.state = SessionState.RESOLVED
        self._recompute_requested = False
        self.tracker.clear_all()
        self.surface.clear_all()

        outcome = self.evaluator.evaluate(self.grid)
        self.outcome = outcome
        self.session.pending_prize = outcome.value
        card_index = self.session.current_card_index
        logger.info("Card %s revealed: won=%s value=%s", card_index, outcome.won, outcome.value)
        self.event_bus.emit(
            CardRevealedEvent(
                card_index=card_index,
                won=outcome.won,
                value=outcome.value,
                winning_cells=outcome.winning_cells,
            )
        )
        self._announcement = self.scheduler.call_later(
            self.config.reveal_delay,
            lambda: self._announce(card_index, outcome),
            label=f"prize-card-{card_index}",
        )

    def _announce(self, card_index: int, outcome: Outcome) -> None:
        self._announcement = None
        self.event_bus.emit(PrizeAnnouncedEvent(card_index=card_index, won=outcome.won, value=outcome.value))

    def _cancel_announcement(self) -> None:
        if self._announcement is not None:
            self._announcement.cancel()
            self._announcement = None

    # ---------- Payout ----------
    def collect_prize(self) -> int:
        """Credit the revealed prize and move on to the next card.

        Returns the amount credited (0 for a losing card).
        """
        if self._closed:
            raise InvalidSessionState("Session controller is closed")
        if self.state is not SessionState.RESOLVED:
            raise InvalidSessionState(f"No prize to collect while {self.state.value}")
        self._cancel_announcement()
        prize = self.session.pending_prize or 0
        self.session.wallet.credit_prize(prize)
        self.session.pending_prize = None
        self.session.cards_remaining -= 1
        self.session.current_card_index += 1
        logger.info("Collected %s (earned=%s, cards_remaining=%s)", prize, self.total_earned, self.session.cards_remaining)

        if self.session.cards_remaining <= 0:
            self._complete()
            return prize

        self.session.state = SessionState.AWAITING_WAGER
        self.grid = None
        self.outcome = None
        if not self.config.auto_rewager:
            self._cover()
            return prize
        try:
            self._take_wager()
        except InsufficientFunds as exc:
            # Already reported through WagerRejectedEvent; the player stays put.
            logger.info("Auto re-wager skipped: %s", exc)
            self._cover()
            return prize
        self._deal()
        return prize

    def _complete(self) -> None:
        self.session.state = SessionState.SESSION_COMPLETE
        logger.info("Session complete: earned=%s final_balance=%s", self.total_earned, self.balance)
        self.event_bus.emit(SessionCompletedEvent(total_earned=self.total_earned, final_balance=self.balance))

    # ---------- Frame tick ----------
    def request_resize(self, width: int, height: int) -> None:
        """Ask for a new surface size; applied on a later frame tick.

        Repeated requests before the tick collapse into the latest one. While
        a card is being scratched or shown, the resize waits for the next
        card so the erased area never shrinks mid-card.
        """
        self._pending_size = (int(width), int(height))

    def on_frame(self, dt: float = 0.0) -> None:
        if self._closed:
            return
        if self._recompute_requested:
            self._recompute_requested = False
            if self.state is SessionState.SCRATCHING:
                self._check_threshold()
        if self._pending_size is not None and self.state in (
            SessionState.AWAITING_WAGER,
            SessionState.SESSION_COMPLETE,
        ):
            self._apply_resize()

    def _apply_resize(self) -> None:
        assert self._pending_size is not None
        width, height = self._pending_size
        self._pending_size = None
        self.tracker.resize(width, height)
        self.surface.reset(width, height)
        self._recompute_requested = False

    # ---------- Teardown ----------
    def close(self) -> None:
        """Cancel deferred work; later gestures and actions become no-ops or errors."""
        if self._closed:
            return
        self._cancel_announcement()
        self._recompute_requested = False
        self._pending_size = None
        self._closed = True
        logger.info("Session controller closed in state %s", self.state.value)
