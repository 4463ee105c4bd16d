from __future__ import annotations

from pathlib import Path

import pytest

from scratchcard import config as config_mod
from scratchcard.cards import DEFAULT_CATALOG, FillerPolicy
from scratchcard.config import GameConfig, load_config, resolve_user_config_path
from scratchcard.exceptions import ConfigError


@pytest.fixture(autouse=True)
def _isolate_user_config(tmp_path, monkeypatch):
    monkeypatch.delenv(config_mod.ENV_CONFIG_PATH, raising=False)
    monkeypatch.setattr(config_mod, "user_config_dir", lambda *a, **k: str(tmp_path / "user-config"))


def test_packaged_defaults_match_dataclass_defaults():
    cfg = load_config()
    assert cfg == GameConfig()
    assert cfg.wager_cost == 10
    assert cfg.cards_per_session == 5
    assert cfg.reveal_threshold == 65.0
    assert cfg.eligible_range == (50, 200)
    assert cfg.filler_policy is FillerPolicy.CAPPED
    assert cfg.catalog == DEFAULT_CATALOG


def test_user_file_overlays_defaults(tmp_path):
    user = tmp_path / "override.yaml"
    user.write_text("wager_cost: 25\nsurface:\n  width: 640\nreveal_threshold: 5\n", encoding="utf-8")
    cfg = load_config(user)
    assert cfg.wager_cost == 25
    assert cfg.reveal_threshold == 5.0
    assert cfg.surface.width == 640
    assert cfg.surface.height == 240  # deep-merged, untouched
    assert cfg.cards_per_session == 5


def test_env_var_points_at_user_file(tmp_path, monkeypatch):
    user = tmp_path / "env.yaml"
    user.write_text("cards_per_session: 3\nauto_rewager: false\n", encoding="utf-8")
    monkeypatch.setenv(config_mod.ENV_CONFIG_PATH, str(user))
    assert resolve_user_config_path() == user
    cfg = load_config()
    assert cfg.cards_per_session == 3
    assert cfg.auto_rewager is False


def test_platform_config_dir_used_when_file_exists(tmp_path):
    assert resolve_user_config_path() is None
    cfg_dir = tmp_path / "user-config"
    cfg_dir.mkdir()
    (cfg_dir / "config.yaml").write_text("starting_balance: 100\n", encoding="utf-8")
    assert load_config().starting_balance == 100


def test_missing_explicit_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_non_mapping_file_is_an_error(tmp_path):
    bad = tmp_path / "list.yaml"
    bad.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)


@pytest.mark.parametrize(
    "overrides",
    [
        {"wager_cost": 0},
        {"cards_per_session": 0},
        {"reveal_threshold": 0},
        {"reveal_threshold": 150},
        {"eligible_range": [200, 50]},
        {"starting_balance": -1},
        {"filler_policy": "sometimes"},
        {"catalog": [{"id": "x"}]},
        {"surface": {"width": "abc", "height": 10}},
        {"surface": {"width": -5, "height": 10}},
        {"surface": 5},
        {"brush_radius": "wide"},
    ],
)
def test_invalid_values_raise_config_error(overrides):
    data = {**config_mod.load_default_data(), **overrides}
    with pytest.raises(ConfigError):
        GameConfig.from_dict(data)


def test_catalog_and_open_eligible_range_from_dict():
    cfg = GameConfig.from_dict(
        {
            "eligible_range": None,
            "catalog": [{"id": "a", "value": 3}, {"value": 7, "image": "seven.png"}],
        }
    )
    assert cfg.eligible_range is None
    assert [s.value for s in cfg.catalog] == [3, 7]
    assert cfg.catalog[1].id == "7"


def test_save_round_trips_through_load(tmp_path):
    cfg = GameConfig(wager_cost=20, filler_policy=FillerPolicy.UNGUARDED)
    path = tmp_path / "nested" / "saved.yaml"
    cfg.save(path)
    assert load_config(path) == cfg
