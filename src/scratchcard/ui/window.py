from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

import arcade

from ..config import GameConfig
from ..core.rng import RNG
from ..engine.loop import EngineConfig, GameEngine
from ..events import (
    BalanceChangedEvent,
    CardRevealedEvent,
    CardStartedEvent,
    PrizeAnnouncedEvent,
    SessionCompletedEvent,
    WagerRejectedEvent,
)
from ..exceptions import InsufficientFunds
from ..input.gesture import GestureRouter
from ..input.viewport import SurfaceViewport
from ..session.controller import SessionController
from ..session.state import SessionState
from ..surface.render import RenderSurface

logger = logging.getLogger(__name__)

MARGIN = 80
HUD_HEIGHT = 120
TILE_PX = 8
COVER_COLOR = (150, 150, 160)
CELL_COLOR = (245, 240, 225)
WIN_COLOR = (255, 215, 80)


class ArcadeCoverSurface(RenderSurface):
    """Cover layer drawn as a grid of solid tiles.

    A tile is removed once a stroke covers its centre. This is only the
    picture; CoverageTracker remains the source of truth for the percentage.
    """

    def __init__(self, left: float, top: float, display_width: float, display_height: float) -> None:
        # left/top in Arcade window coordinates (origin bottom-left)
        self.left = left
        self.top = top
        self.display_width = display_width
        self.display_height = display_height
        self.sprites = arcade.SpriteList()
        self._tiles: Dict[Tuple[int, int], arcade.Sprite] = {}
        self._scale = (1.0, 1.0)

    def reset(self, width: int, height: int) -> None:
        self.sprites.clear()
        self._tiles.clear()
        if width <= 0 or height <= 0:
            return
        self._scale = (width / self.display_width, height / self.display_height)
        cols = int(self.display_width // TILE_PX) + 1
        rows = int(self.display_height // TILE_PX) + 1
        for row in range(rows):
            for col in range(cols):
                tile = arcade.SpriteSolidColor(width=TILE_PX, height=TILE_PX, color=COVER_COLOR)
                tile.center_x = self.left + (col + 0.5) * TILE_PX
                tile.center_y = self.top - (row + 0.5) * TILE_PX
                self.sprites.append(tile)
                self._tiles[(col, row)] = tile

    def erase(self, x: float, y: float, radius: float) -> None:
        sx, sy = self._scale
        # back to display units
        cx, cy, r = x / sx, y / sy, radius / max(sx, sy)
        col0, col1 = int((cx - r) // TILE_PX), int((cx + r) // TILE_PX)
        row0, row1 = int((cy - r) // TILE_PX), int((cy + r) // TILE_PX)
        for row in range(row0, row1 + 1):
            for col in range(col0, col1 + 1):
                tx = (col + 0.5) * TILE_PX - cx
                ty = (row + 0.5) * TILE_PX - cy
                if tx * tx + ty * ty > r * r:
                    continue
                tile = self._tiles.pop((col, row), None)
                if tile is not None:
                    tile.remove_from_sprite_lists()

    def clear_all(self) -> None:
        self.sprites.clear()
        self._tiles.clear()

    def draw(self) -> None:
        self.sprites.draw()


class ScratchWindow(arcade.Window):
    """
    Main game window.

    Responsibilities:
    - Lay out the card grid, cover and HUD
    - Translate Arcade mouse events into GestureRouter calls
    - Drive the GameEngine from Arcade's clock
    """

    def __init__(self, config: GameConfig, seed: Optional[int] = None) -> None:
        display_w, display_h = config.surface.width, config.surface.height
        super().__init__(display_w + 2 * MARGIN, display_h + 2 * MARGIN + HUD_HEIGHT, title="Scratch Card")
        self.background_color = arcade.color.DARK_SLATE_GRAY

        # Card area in client coordinates (origin top-left, y down)
        self.card_left = MARGIN
        self.card_top = MARGIN + HUD_HEIGHT
        self.display_w = display_w
        self.display_h = display_h

        self.engine = GameEngine(EngineConfig(tick_rate=config.tick_rate))
        self.cover = ArcadeCoverSurface(
            left=self.card_left,
            top=self.height - self.card_top,
            display_width=display_w,
            display_height=display_h,
        )
        self.controller = SessionController(
            config,
            scheduler=self.engine.scheduler,
            rng=RNG(seed),
            surface=self.cover,
        )
        viewport = SurfaceViewport(
            self.card_left, self.card_top, display_w, display_h, config.surface.width, config.surface.height
        )
        self.router = GestureRouter(self.controller, viewport)
        self.engine.add_frame_hook(self.controller.on_frame)

        self.message = "Press SPACE to buy a card"
        self.popup: Optional[str] = None
        bus = self.controller.event_bus
        bus.subscribe(CardStartedEvent, self._on_card_started)
        bus.subscribe(CardRevealedEvent, self._on_card_revealed)
        bus.subscribe(PrizeAnnouncedEvent, self._on_prize_announced)
        bus.subscribe(WagerRejectedEvent, self._on_wager_rejected)
        bus.subscribe(SessionCompletedEvent, self._on_session_completed)
        bus.subscribe(BalanceChangedEvent, lambda e: logger.debug("Balance now %s", e.balance))

        self.engine.start()
        logger.info("ScratchWindow initialized: %dx%d", self.width, self.height)

    # ---------- Event sink ----------
    def _on_card_started(self, event: CardStartedEvent) -> None:
        self.popup = None
        self.message = "Scratch the card! (R reveals everything)"

    def _on_card_revealed(self, event: CardRevealedEvent) -> None:
        self.message = "Revealed..."

    def _on_prize_announced(self, event: PrizeAnnouncedEvent) -> None:
        if event.won:
            self.popup = f"You won {event.value}!"
        else:
            self.popup = "No prize this time"
        self.message = "Press SPACE to collect"

    def _on_wager_rejected(self, event: WagerRejectedEvent) -> None:
        self.message = event.message

    def _on_session_completed(self, event: SessionCompletedEvent) -> None:
        self.popup = None
        self.message = f"All cards done. Redeem {event.total_earned}"

    # ---------- Arcade lifecycle ----------
    def _to_arcade_y(self, client_y: float) -> float:
        return self.height - client_y

    def on_draw(self):
        self.clear()
        self._draw_grid()
        self.cover.draw()
        self._draw_hud()

    def _draw_grid(self) -> None:
        grid = self.controller.grid
        if grid is None:
            return
        winners = self.controller.outcome.winning_cells if self.controller.outcome else frozenset()
        cell_w, cell_h = self.display_w / 3, self.display_h / 3
        for index, symbol in enumerate(grid.cells):
            row, col = divmod(index, 3)
            left = self.card_left + col * cell_w
            top = self._to_arcade_y(self.card_top + row * cell_h)
            color = WIN_COLOR if index in winners else CELL_COLOR
            arcade.draw_lrbt_rectangle_filled(left + 2, left + cell_w - 2, top - cell_h + 2, top - 2, color)
            arcade.draw_text(
                str(symbol.value),
                left + cell_w / 2,
                top - cell_h / 2,
                arcade.color.BLACK,
                font_size=20,
                anchor_x="center",
                anchor_y="center",
            )

    def _draw_hud(self) -> None:
        hud_y = self.height - 30
        arcade.draw_text(f"Balance: {self.controller.balance}", MARGIN, hud_y, arcade.color.WHITE, 14)
        arcade.draw_text(f"Earned: {self.controller.total_earned}", MARGIN + 180, hud_y, arcade.color.WHITE, 14)
        arcade.draw_text(self.controller.card_label(), MARGIN, hud_y - 30, arcade.color.LIGHT_GRAY, 14)
        arcade.draw_text(self.message, MARGIN, hud_y - 60, arcade.color.LIGHT_GRAY, 12)
        if self.popup:
            arcade.draw_text(
                self.popup,
                self.width / 2,
                MARGIN / 2,
                arcade.color.GOLD,
                font_size=22,
                anchor_x="center",
                anchor_y="center",
            )

    def on_update(self, delta_time: float):
        if self.engine.running:
            self.engine.update(delta_time)
        else:
            self.close()

    # ---------- Input ----------
    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.router.press(x, self._to_arcade_y(y))

    def on_mouse_drag(self, x: float, y: float, dx: float, dy: float, buttons: int, modifiers: int):
        self.router.move(x, self._to_arcade_y(y))

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        self.router.release()

    def on_key_press(self, symbol: int, modifiers: int):
        state = self.controller.state
        if symbol == arcade.key.SPACE:
            if state is SessionState.AWAITING_WAGER:
                try:
                    self.controller.start_card()
                except InsufficientFunds:
                    logger.info("Player cannot afford another card")
            elif state is SessionState.RESOLVED:
                self.controller.collect_prize()
        elif symbol == arcade.key.R:
            self.controller.reveal_all()
        elif symbol == arcade.key.ESCAPE:
            self.close()

    def on_close(self):
        self.controller.close()
        self.engine.stop()
        super().on_close()


def run_window(config: GameConfig, seed: Optional[int] = None) -> None:  # pragma: no cover - manual usage
    """Open the game window and block until it is closed."""
    window = ScratchWindow(config, seed=seed)
    logger.info("Launching Arcade window")
    arcade.run()
    window.controller.close()
