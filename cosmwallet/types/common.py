"""Common type definitions for cosmwallet."""

from typing import NewType

__all__ = [
    "HexStr",
    "Address",
    "Seed",
    "PublicKeyBytes",
    "Signature",
    "TxHash",
]

# Basic types
HexStr = NewType("HexStr", str)
"""Hexadecimal string representation."""

Address = NewType("Address", str)
"""Bech32 account address string."""

TxHash = NewType("TxHash", str)
"""Uppercase hex SHA-256 of the transaction wire bytes."""

# Crypto types
Seed = NewType("Seed", bytes)
"""64-byte BIP39 seed."""

PublicKeyBytes = NewType("PublicKeyBytes", bytes)
"""33-byte compressed public key."""

Signature = NewType("Signature", bytes)
"""64-byte raw r||s signature."""
