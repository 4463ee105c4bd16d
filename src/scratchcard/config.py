from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from platformdirs import user_config_dir

from .cards.generator import FillerPolicy
from .cards.symbols import DEFAULT_CATALOG, Symbol
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

APP_NAME = "scratchcard"
ENV_CONFIG_PATH = "SCRATCHCARD_CONFIG"
USER_CONFIG_FILENAME = "config.yaml"


@dataclass
class SurfaceConfig:
    """Backing resolution of the cover layer, in pixels."""

    width: int = 320
    height: int = 240


@dataclass
class GameConfig:
    """
    Game rules and tuning knobs, injected into the session controller.

    Defaults match the packaged ``configs/default.yaml``:
      - starting_balance: balance at session start (50)
      - wager_cost: deducted per card (10)
      - cards_per_session: cards dealt before the session completes (5)
      - reveal_threshold: percent of the cover that must be erased (65)
      - eligible_range: inclusive value range for the winning symbol ([50, 200])
      - auto_rewager: deduct the wager and deal cards 2..N automatically
    """

    starting_balance: int = 50
    wager_cost: int = 10
    cards_per_session: int = 5
    reveal_threshold: float = 65.0
    eligible_range: Optional[Tuple[int, int]] = (50, 200)
    brush_radius: float = 18.0
    reveal_delay: float = 0.8
    auto_rewager: bool = True
    filler_policy: FillerPolicy = FillerPolicy.CAPPED
    recompute_per_frame: bool = False
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    tick_rate: float = 60.0
    catalog: Tuple[Symbol, ...] = DEFAULT_CATALOG

    def validate(self) -> "GameConfig":
        if self.starting_balance < 0:
            raise ConfigError("starting_balance must be non-negative")
        if self.wager_cost <= 0:
            raise ConfigError("wager_cost must be positive")
        if self.cards_per_session <= 0:
            raise ConfigError("cards_per_session must be positive")
        if not 0 < self.reveal_threshold <= 100:
            raise ConfigError(f"reveal_threshold must be in (0, 100], got {self.reveal_threshold}")
        if self.eligible_range is not None and self.eligible_range[0] > self.eligible_range[1]:
            raise ConfigError(f"eligible_range is inverted: {self.eligible_range}")
        if self.brush_radius <= 0:
            raise ConfigError("brush_radius must be positive")
        if self.reveal_delay < 0:
            raise ConfigError("reveal_delay must be non-negative")
        if self.surface.width < 0 or self.surface.height < 0:
            raise ConfigError("surface size must be non-negative")
        return self

    # ---------- (De)serialization ----------
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameConfig":
        try:
            eligible = data.get("eligible_range", (50, 200))
            if eligible is not None:
                low, high = eligible
                eligible = (int(low), int(high))
            catalog = tuple(
                Symbol(id=str(entry.get("id", entry["value"])), value=int(entry["value"]), image=entry.get("image"))
                for entry in data.get("catalog", [])
            ) or DEFAULT_CATALOG
            surface = data.get("surface") or {}
            cfg = cls(
                starting_balance=int(data.get("starting_balance", 50)),
                wager_cost=int(data.get("wager_cost", 10)),
                cards_per_session=int(data.get("cards_per_session", 5)),
                reveal_threshold=float(data.get("reveal_threshold", 65.0)),
                eligible_range=eligible,
                brush_radius=float(data.get("brush_radius", 18.0)),
                reveal_delay=float(data.get("reveal_delay", 0.8)),
                auto_rewager=bool(data.get("auto_rewager", True)),
                filler_policy=FillerPolicy(data.get("filler_policy", FillerPolicy.CAPPED.value)),
                recompute_per_frame=bool(data.get("recompute_per_frame", False)),
                surface=SurfaceConfig(
                    width=int(surface.get("width", 320)),
                    height=int(surface.get("height", 240)),
                ),
                tick_rate=float(data.get("tick_rate", 60.0)),
                catalog=catalog,
            )
            return cfg.validate()
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "starting_balance": self.starting_balance,
            "wager_cost": self.wager_cost,
            "cards_per_session": self.cards_per_session,
            "reveal_threshold": self.reveal_threshold,
            "eligible_range": list(self.eligible_range) if self.eligible_range is not None else None,
            "brush_radius": self.brush_radius,
            "reveal_delay": self.reveal_delay,
            "auto_rewager": self.auto_rewager,
            "filler_policy": self.filler_policy.value,
            "recompute_per_frame": self.recompute_per_frame,
            "surface": dataclasses.asdict(self.surface),
            "tick_rate": self.tick_rate,
            "catalog": [dataclasses.asdict(s) for s in self.catalog],
        }

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=False)
        logger.info("Saved config to %s", path)


def _deep_merge(base: dict, overlay: dict) -> dict:
    merged = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            merged[k] = _deep_merge(base[k], v)
        else:
            merged[k] = v
    return merged


def _load_yaml(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")
    return data


def load_default_data() -> dict:
    with resources.files("scratchcard.configs").joinpath("default.yaml").open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def resolve_user_config_path(explicit: Optional[Path] = None) -> Optional[Path]:
    """Find the user override file.

    Order: explicit path, then the SCRATCHCARD_CONFIG environment variable,
    then ``config.yaml`` in the platform user config directory (only if it
    exists).
    """
    if explicit is not None:
        return Path(explicit).expanduser()
    env_path = os.getenv(ENV_CONFIG_PATH)
    if env_path:
        return Path(env_path).expanduser()
    candidate = Path(user_config_dir(APP_NAME, appauthor=False)) / USER_CONFIG_FILENAME
    if candidate.exists():
        return candidate
    return None


def load_config(user_path: Optional[Path] = None) -> GameConfig:
    """Load packaged defaults and overlay the user's config file if any."""
    data = load_default_data()
    path = resolve_user_config_path(user_path)
    if path is not None:
        if path.exists():
            data = _deep_merge(data, _load_yaml(path))
            logger.info("Loaded user config from %s", path)
        else:
            raise ConfigError(f"Config file not found: {path}")
    cfg = GameConfig.from_dict(data)
    logger.debug("Config resolved: %s", cfg)
    return cfg


__all__ = [
    "GameConfig",
    "SurfaceConfig",
    "load_config",
    "resolve_user_config_path",
]
