"""Validation utilities for cosmwallet."""

import re
from typing import Optional, Union

from ..constants import ADDRESS_DIGEST_LENGTH, SECP256K1_ORDER
from ..exceptions import AddressEncodingFailed, KeyDerivationFailed
from ..types.common import Address
from ..utils.encoding import decode_bech32

__all__ = [
    "is_valid_address",
    "validate_address",
    "is_valid_private_key",
    "validate_private_key",
    "is_valid_public_key",
    "validate_public_key",
    "validate_uint64",
    "validate_amount",
    "validate_denom",
]

HEX_PATTERN = re.compile(r"^[0-9a-fA-F]*$")
AMOUNT_PATTERN = re.compile(r"^[0-9]+$")
# Denom rule of the Cosmos SDK bank module
DENOM_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{2,127}$")


def _key_bytes(key: Union[str, bytes, bytearray], kind: str) -> bytes:
    if isinstance(key, str):
        if key.startswith("0x"):
            key = key[2:]
        if not HEX_PATTERN.match(key) or len(key) % 2:
            raise KeyDerivationFailed(f"{kind} key must be hexadecimal")
        return bytes.fromhex(key)
    return bytes(key)


def is_valid_address(address: str, hrp: Optional[str] = None) -> bool:
    """
    Check if a bech32 account address is valid.

    Args:
        address: Address to validate
        hrp: Optional human-readable prefix the address must carry

    Returns:
        True if valid, False otherwise
    """
    try:
        validate_address(address, hrp)
        return True
    except AddressEncodingFailed:
        return False


def validate_address(address: str, hrp: Optional[str] = None) -> Address:
    """
    Validate a bech32 account address and return its normalized form.

    Args:
        address: Address to validate
        hrp: Optional human-readable prefix the address must carry

    Returns:
        Lowercase address

    Raises:
        AddressEncodingFailed: If the address is malformed, carries a payload
            other than a 20-byte digest, or has the wrong prefix
    """
    if not isinstance(address, str):
        raise AddressEncodingFailed(f"Address must be a string, got {type(address).__name__}")

    decoded_hrp, payload = decode_bech32(address)
    if len(payload) != ADDRESS_DIGEST_LENGTH:
        raise AddressEncodingFailed(
            f"Address payload must be {ADDRESS_DIGEST_LENGTH} bytes, got {len(payload)}"
        )
    if hrp is not None and decoded_hrp != hrp.lower():
        raise AddressEncodingFailed(f"Wrong address prefix: expected {hrp}, got {decoded_hrp}")

    return Address(address.lower())


def is_valid_private_key(key: Union[str, bytes, bytearray]) -> bool:
    """
    Check if private key format is valid.

    Args:
        key: Private key as hex string or bytes

    Returns:
        True if valid, False otherwise
    """
    try:
        validate_private_key(key)
        return True
    except KeyDerivationFailed:
        return False


def validate_private_key(key: Union[str, bytes, bytearray]) -> bytes:
    """
    Validate private key and return as bytes.

    Args:
        key: Private key as hex string or bytes

    Returns:
        Private key as 32 bytes

    Raises:
        KeyDerivationFailed: If the key is not a scalar in ``[1, n)``
    """
    key = _key_bytes(key, "Private")

    if len(key) != 32:
        raise KeyDerivationFailed(f"Private key must be 32 bytes, got {len(key)}")

    key_int = int.from_bytes(key, "big")
    if key_int == 0:
        raise KeyDerivationFailed("Private key cannot be zero")
    if key_int >= SECP256K1_ORDER:
        raise KeyDerivationFailed("Private key exceeds curve order")

    return key


def is_valid_public_key(key: Union[str, bytes, bytearray]) -> bool:
    """Check if a compressed public key is well formed."""
    try:
        validate_public_key(key)
        return True
    except KeyDerivationFailed:
        return False


def validate_public_key(key: Union[str, bytes, bytearray]) -> bytes:
    """
    Validate a compressed public key and return it as bytes.

    Only the SEC1 prefix and length are checked here; curve membership is
    checked when the key is loaded by coincurve.

    Raises:
        KeyDerivationFailed: If the key is not a 33-byte compressed point
    """
    key = _key_bytes(key, "Public")

    if len(key) != 33:
        raise KeyDerivationFailed(f"Public key must be 33 bytes, got {len(key)}")
    if key[0] not in (0x02, 0x03):
        raise KeyDerivationFailed("Compressed public key must start with 0x02 or 0x03")

    return key


def validate_uint64(value: int, name: str) -> int:
    """
    Check that ``value`` fits a protobuf uint64 field.

    Raises:
        ValueError: If the value is not an integer in ``[0, 2**64)``
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value < 1 << 64:
        raise ValueError(f"{name} must be in the uint64 range, got {value}")
    return value


def validate_amount(amount: Union[str, int]) -> str:
    """
    Normalize a coin amount to its integer string form.

    Raises:
        ValueError: If the amount is negative or not an integer
    """
    if isinstance(amount, int) and not isinstance(amount, bool):
        if amount < 0:
            raise ValueError(f"Amount cannot be negative: {amount}")
        return str(amount)
    if not isinstance(amount, str) or not AMOUNT_PATTERN.match(amount):
        raise ValueError(f"Amount must be a non-negative integer string, got {amount!r}")
    return amount


def validate_denom(denom: str) -> str:
    """
    Check a coin denomination against the bank module's denom rule.

    Raises:
        ValueError: If the denom is malformed
    """
    if not isinstance(denom, str) or not DENOM_PATTERN.match(denom):
        raise ValueError(f"Invalid coin denomination: {denom!r}")
    return denom
