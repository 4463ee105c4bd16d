from .wallet import Wallet

__all__ = ["Wallet"]
