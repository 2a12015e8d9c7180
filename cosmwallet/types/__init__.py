"""Type definitions for cosmwallet.

Transaction types live in :mod:`cosmwallet.types.transaction` and are
imported from there directly; they depend on the encoding utilities, which in
turn depend on the leaf types re-exported here.
"""

# Common types
from ..types.common import (
    HexStr,
    Address,
    TxHash,
    Seed,
    PublicKeyBytes,
    Signature,
)

# Account types
from ..types.account import AccountInfo, BroadcastResult

__all__ = [
    # Common
    "HexStr",
    "Address",
    "TxHash",
    "Seed",
    "PublicKeyBytes",
    "Signature",

    # Account
    "AccountInfo",
    "BroadcastResult",
]
