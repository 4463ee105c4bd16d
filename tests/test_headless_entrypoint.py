from __future__ import annotations

import logging
import os
import subprocess
import sys
from pathlib import Path

from scratchcard.app import HeadlessPlayer, run_auto, run_headless
from scratchcard.config import GameConfig, SurfaceConfig
from scratchcard.core.rng import RNG
from scratchcard.engine import EngineConfig, GameEngine
from scratchcard.input import GestureRouter, SurfaceViewport
from scratchcard.session import SessionController, SessionState

SRC = Path(__file__).resolve().parents[1] / "src"


def test_headless_player_completes_a_session():
    cfg = GameConfig(surface=SurfaceConfig(90, 60), reveal_delay=0.1)
    engine = GameEngine(EngineConfig(tick_rate=0, max_steps=5000))
    controller = SessionController(cfg, scheduler=engine.scheduler, rng=RNG(3))
    router = GestureRouter(controller, SurfaceViewport.identity(90, 60))
    player = HeadlessPlayer(controller, router)
    engine.add_frame_hook(controller.on_frame)
    engine.add_frame_hook(player.step)
    engine.add_frame_hook(lambda dt: engine.stop() if player.finished else None)

    engine.run()

    assert controller.state is SessionState.SESSION_COMPLETE
    assert controller.balance == 0
    # every dealt card carries a 50/100/200 triple
    assert 250 <= controller.total_earned <= 1000


def test_run_headless_prints_summary(capsys):
    code = run_headless(GameConfig(surface=SurfaceConfig(60, 60)), seed=1)
    out = capsys.readouterr().out
    assert code == 0
    assert "Scratch Card (headless)" in out
    assert "Card 5 of 5" in out
    assert "Session complete: earned=" in out


def test_headless_entrypoint_exits_successfully(tmp_path):
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC), env.get("PYTHONPATH")]))
    env["SCRATCHCARD_CONFIG"] = str(tmp_path / "cfg.yaml")
    (tmp_path / "cfg.yaml").write_text("surface:\n  width: 60\n  height: 40\n", encoding="utf-8")
    cmd = [sys.executable, "-m", "scratchcard", "--headless", "--seed", "4"]
    proc = subprocess.run(cmd, capture_output=True, text=True, env=env, timeout=60)

    assert proc.returncode == 0, proc.stderr
    assert "Scratch Card (headless)" in proc.stdout
    assert "Session complete: earned=" in proc.stdout
    assert "Loop complete (steps=" in proc.stdout


def test_run_auto_reports_degenerate_catalog(tmp_path, monkeypatch, caplog):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text(
        "catalog:\n  - {id: a, value: 100}\n  - {id: b, value: 50}\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("SCRATCHCARD_HEADLESS", "1")

    with caplog.at_level(logging.ERROR, logger="scratchcard.app"):
        code = run_auto(config_path=cfg, seed=1)

    assert code == 2
    assert "Cannot start" in caplog.text


def test_run_auto_reports_malformed_surface(tmp_path, monkeypatch):
    cfg = tmp_path / "cfg.yaml"
    cfg.write_text("surface:\n  width: abc\n  height: 10\n", encoding="utf-8")
    monkeypatch.setenv("SCRATCHCARD_HEADLESS", "1")

    assert run_auto(config_path=cfg, seed=1) == 2
