from .loop import EngineConfig, GameEngine
from .scheduler import DeferredCall, Scheduler

__all__ = ["EngineConfig", "GameEngine", "DeferredCall", "Scheduler"]
