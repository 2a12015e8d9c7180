"""Wallet and message modules for cosmwallet."""

from ..modules.wallet import MnemonicWallet
from ..modules.bank import MsgSend

__all__ = [
    "MnemonicWallet",
    "MsgSend",
]
