from .state import Session, SessionState
from .controller import SessionController

__all__ = ["Session", "SessionState", "SessionController"]
