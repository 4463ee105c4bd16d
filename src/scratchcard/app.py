from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from .config import GameConfig, load_config
from .core.rng import RNG
from .engine.loop import EngineConfig, GameEngine
from .events import (
    CardRevealedEvent,
    CardStartedEvent,
    PrizeAnnouncedEvent,
    SessionCompletedEvent,
    WagerRejectedEvent,
)
from .exceptions import InsufficientFunds, ScratchCardError
from .input.autoplay import AutoScratcher
from .input.gesture import GestureRouter, PointerSample
from .input.viewport import SurfaceViewport
from .session.controller import SessionController
from .session.state import SessionState

logger = logging.getLogger(__name__)

# Safety bound for headless runs
HEADLESS_MAX_STEPS = 100_000


class HeadlessPlayer:
    """Plays a whole session from the frame loop without a window.

    Each frame it buys a card, feeds a few scripted drag samples, or collects
    the prize once the delayed announcement has fired.
    """

    def __init__(self, controller: SessionController, router: GestureRouter, samples_per_frame: int = 8) -> None:
        self.controller = controller
        self.router = router
        self.samples_per_frame = samples_per_frame
        self.stuck = False
        self._samples: Optional[Iterator[PointerSample]] = None
        self._announced = False
        controller.event_bus.subscribe(CardStartedEvent, self._on_card_started)
        controller.event_bus.subscribe(PrizeAnnouncedEvent, self._on_prize_announced)

    @property
    def finished(self) -> bool:
        return self.stuck or self.controller.state is SessionState.SESSION_COMPLETE

    def _on_card_started(self, event: CardStartedEvent) -> None:
        scratcher = AutoScratcher(self.router.viewport, self.router.brush_radius)
        self._samples = scratcher.samples()
        self._announced = False

    def _on_prize_announced(self, event: PrizeAnnouncedEvent) -> None:
        self._announced = True

    def step(self, dt: float) -> None:
        state = self.controller.state
        if state is SessionState.AWAITING_WAGER:
            try:
                self.controller.start_card()
            except InsufficientFunds as exc:
                logger.info("Headless player stopped: %s", exc)
                self.stuck = True
        elif state is SessionState.SCRATCHING:
            self._scratch()
        elif state is SessionState.RESOLVED and self._announced:
            self.controller.collect_prize()

    def _scratch(self) -> None:
        assert self._samples is not None
        for _ in range(self.samples_per_frame):
            sample = next(self._samples, None)
            if sample is None:
                # Drag pattern exhausted without reaching the threshold.
                self.controller.reveal_all()
                return
            self.router.feed(sample)
            if self.controller.state is not SessionState.SCRATCHING:
                self.router.release()
                return


def _print_events(controller: SessionController) -> None:
    bus = controller.event_bus
    bus.subscribe(CardStartedEvent, lambda e: print(f"Card {e.card_index} of {e.cards_total} (balance {e.balance})"))
    bus.subscribe(
        CardRevealedEvent,
        lambda e: print(f"  revealed: {'won ' + str(e.value) if e.won else 'no prize'} cells={sorted(e.winning_cells)}"),
    )
    bus.subscribe(WagerRejectedEvent, lambda e: print(f"  {e.message} (balance {e.balance}, cost {e.cost})"))
    bus.subscribe(
        SessionCompletedEvent,
        lambda e: print(f"Session complete: earned={e.total_earned} balance={e.final_balance}"),
    )


def run_headless(config: Optional[GameConfig] = None, seed: Optional[int] = None, tick_rate: float = 0.0) -> int:
    """Play one full session in the console with a scripted player.

    Args:
        config: Game configuration; packaged defaults if None.
        seed: RNG seed for reproducible grids.
        tick_rate: Frame rate to throttle to; 0 runs as fast as possible.
    """
    config = config or load_config()
    print("Scratch Card (headless)")

    engine = GameEngine(EngineConfig(tick_rate=tick_rate, max_steps=HEADLESS_MAX_STEPS))
    controller = SessionController(config, scheduler=engine.scheduler, rng=RNG(seed))
    viewport = SurfaceViewport.identity(config.surface.width, config.surface.height)
    router = GestureRouter(controller, viewport)
    player = HeadlessPlayer(controller, router)
    _print_events(controller)

    engine.add_frame_hook(controller.on_frame)
    engine.add_frame_hook(player.step)
    engine.add_frame_hook(lambda dt: engine.stop() if player.finished else None)
    try:
        engine.run()
    except KeyboardInterrupt:
        engine.stop()
        print("Interrupted by user")
        return 130
    finally:
        controller.close()

    if player.stuck:
        print(f"Stopped early: earned={controller.total_earned} balance={controller.balance}")
    print(f"Loop complete (steps={engine.step})")
    return 0


def run_gui(config: Optional[GameConfig] = None, seed: Optional[int] = None) -> int:
    """Open the Arcade window."""
    from .ui.window import run_window

    run_window(config or load_config(), seed=seed)
    return 0


def run_auto(config_path: Optional[Path] = None, seed: Optional[int] = None, tick_rate: Optional[float] = None) -> int:
    """Run the GUI unless SCRATCHCARD_HEADLESS=1 is set."""
    headless = os.getenv("SCRATCHCARD_HEADLESS") == "1"
    try:
        config = load_config(config_path)
        if headless:
            return run_headless(config, seed=seed, tick_rate=tick_rate or 0.0)
        return run_gui(config, seed=seed)
    except ScratchCardError as exc:
        # Bad config or a catalog the generator cannot deal from.
        logger.error("Cannot start: %s", exc)
        return 2
