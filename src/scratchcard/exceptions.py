class ScratchCardError(Exception):
    """Base exception for the scratch card game."""


class InsufficientFunds(ScratchCardError):
    """Raised when a wager is attempted with a balance below its cost."""

    def __init__(self, balance: int, cost: int) -> None:
        super().__init__(f"Insufficient balance: have {balance}, need {cost}")
        self.balance = balance
        self.cost = cost


class InvalidGestureState(ScratchCardError):
    """Raised when an erase or resolve signal arrives outside the scratching state."""


class InvalidSessionState(ScratchCardError):
    """Raised when a session operation cannot be performed in the current state."""


class DegenerateCatalog(ScratchCardError):
    """Raised when a symbol catalog cannot satisfy the grid guarantees."""


class ConfigError(ScratchCardError):
    """Raised for invalid or unreadable game configuration."""
