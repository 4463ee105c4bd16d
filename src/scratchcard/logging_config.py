import logging
import os

ENV_LOG_LEVEL = "SCRATCHCARD_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

# Arcade and its image loader chatter at INFO while the window opens.
_NOISY_LOGGERS = ("arcade", "PIL")


def _level_from_env(fallback: int) -> int:
    name = os.getenv(ENV_LOG_LEVEL)
    if not name:
        return fallback
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else fallback


def configure_logging(default_level: int = logging.WARNING) -> int:
    """Set up console logging for a game run and return the level in effect.

    SCRATCHCARD_LOG_LEVEL (e.g. ``debug``) takes precedence over the level
    derived from ``-v`` flags; unknown names fall back to ``default_level``.
    """
    level = _level_from_env(default_level)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return level
