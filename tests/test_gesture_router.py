from __future__ import annotations

import pytest

from scratchcard.cards import Grid, Symbol
from scratchcard.config import GameConfig, SurfaceConfig
from scratchcard.input import GestureRouter, PointerSample, SurfaceViewport, TouchPoint
from scratchcard.session import SessionController, SessionState
from scratchcard.surface.render import NullSurface

LOSING = Grid(cells=tuple(Symbol(str(v), v) for v in [1, 1, 2, 2, 5, 5, 10, 10, 20]), winning_value=0)


class _Fixed:
    def generate(self) -> Grid:
        return LOSING


def _controller(**overrides) -> SessionController:
    cfg = GameConfig(surface=SurfaceConfig(200, 100), **overrides)
    return SessionController(cfg, generator=_Fixed(), surface=NullSurface())


def test_viewport_maps_axes_independently():
    vp = SurfaceViewport(left=10, top=20, display_width=100, display_height=100, backing_width=200, backing_height=50)
    assert vp.scale_x == 2.0
    assert vp.scale_y == 0.5
    assert vp.to_surface(60, 70) == (100.0, 25.0)
    assert vp.contains(10, 20)
    assert not vp.contains(110, 20)


def test_viewport_with_zero_display_size_has_zero_scale():
    vp = SurfaceViewport(0, 0, 0, 0, 100, 100)
    assert vp.scale_x == 0.0 and vp.scale_y == 0.0


def test_press_before_wager_does_not_start_pressing():
    controller = _controller()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100))
    assert router.press(10, 10) is False
    assert router.pressing is False
    assert router.move(20, 10) is False
    assert controller.tracker.coverage_percent() == 0


def test_strokes_only_while_pressed():
    controller = _controller()
    controller.start_card()
    surface = controller.surface
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100), brush_radius=5)

    assert router.move(50, 50) is False  # hover without press
    assert router.press(50, 50) is True
    assert router.move(60, 50) is True
    router.release()
    assert router.move(70, 50) is False
    assert [s[:2] for s in surface.strokes] == [(50.0, 50.0), (60.0, 50.0)]


def test_coordinates_and_radius_scaled_into_backing_pixels():
    controller = _controller()
    controller.start_card()
    vp = SurfaceViewport(left=100, top=50, display_width=100, display_height=50, backing_width=200, backing_height=100)
    router = GestureRouter(controller, vp, brush_radius=4)
    router.press(150, 75)
    assert controller.surface.strokes == [(100.0, 50.0, 8.0)]
    assert controller.tracker.is_erased(100, 50)


def test_default_brush_radius_comes_from_config():
    controller = _controller(brush_radius=12)
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100))
    assert router.brush_radius == 12
    assert router.surface_radius == 12


def test_first_touch_point_is_followed_and_others_ignored():
    controller = _controller()
    controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100), brush_radius=3)
    assert router.touch_start([TouchPoint(10, 10), TouchPoint(190, 90)]) is True
    assert router.touch_move([TouchPoint(20, 10), TouchPoint(180, 90)]) is True
    router.touch_end()
    assert router.touch_move([TouchPoint(30, 10)]) is False
    assert [s[:2] for s in controller.surface.strokes] == [(10.0, 10.0), (20.0, 10.0)]
    assert not controller.tracker.is_erased(190, 90)


def test_empty_touch_list_is_ignored():
    controller = _controller()
    controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100))
    assert router.touch_start([]) is False
    assert router.touch_move([]) is False


def test_feed_dispatches_press_move_release():
    controller = _controller()
    controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100), brush_radius=2)
    assert router.feed(PointerSample(5, 5, True, source="mouse")) is True
    assert router.pressing
    assert router.feed(PointerSample(9, 5, True)) is True
    assert router.feed(PointerSample(9, 5, False)) is False
    assert not router.pressing
    assert len(controller.surface.strokes) == 2


def test_reveal_stops_further_strokes_even_while_pressed():
    controller = _controller()
    controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100), brush_radius=500)
    assert router.press(100, 50) is True
    assert controller.state is SessionState.RESOLVED
    assert router.move(110, 50) is False


@pytest.mark.parametrize("start, expected", [(False, False), (True, True)])
def test_default_gestures_suppressed_only_while_scratching(start, expected):
    controller = _controller()
    if start:
        controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100))
    assert router.should_suppress_default() is expected


def test_update_viewport_changes_mapping():
    controller = _controller()
    controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100), brush_radius=1)
    router.update_viewport(SurfaceViewport(0, 0, 100, 50, 200, 100))
    router.press(10, 10)
    assert controller.surface.strokes[-1] == (20.0, 20.0, 2.0)


def test_held_drag_does_not_carry_into_the_next_card():
    controller = _controller(reveal_threshold=1)
    controller.start_card()
    router = GestureRouter(controller, SurfaceViewport.identity(200, 100), brush_radius=20)

    assert router.press(100, 50) is True
    assert controller.state is SessionState.RESOLVED
    assert router.pressing is False

    controller.collect_prize()  # auto re-wager deals card 2
    assert controller.state is SessionState.SCRATCHING
    assert router.move(120, 50) is False
    assert controller.tracker.coverage_percent() == 0
    assert router.press(120, 50) is True
