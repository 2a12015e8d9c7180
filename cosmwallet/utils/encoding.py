"""Encoding and decoding utilities for cosmwallet."""

import hashlib
from typing import List, Tuple, Union

from Crypto.Hash import RIPEMD160

from ..exceptions import AddressEncodingFailed
from ..types.common import Address, HexStr

__all__ = [
    "hex_to_bytes",
    "bytes_to_hex",
    "sha256",
    "hash160",
    "double_sha256",
    "encode_base58",
    "encode_base58_check",
    "convert_bits",
    "encode_bech32",
    "decode_bech32",
    "public_key_to_address",
]

# Constants
BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BECH32_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
BECH32_CONST = 1
BECH32_CHECKSUM_LENGTH = 6
BECH32_MAX_HRP_LENGTH = 83


def hex_to_bytes(hex_str: Union[HexStr, str]) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_str: Hex string with or without 0x prefix

    Returns:
        Decoded bytes

    Raises:
        ValueError: If hex string is invalid
    """
    if hex_str.startswith(("0x", "0X")):
        hex_str = hex_str[2:]
    try:
        return bytes.fromhex(hex_str)
    except ValueError as e:
        raise ValueError(f"Invalid hex string of length {len(hex_str)}") from e


def bytes_to_hex(data: bytes, prefix: bool = False) -> HexStr:
    """
    Convert bytes to hex string.

    Args:
        data: Bytes to encode
        prefix: Add 0x prefix

    Returns:
        Lowercase hex string
    """
    hex_str = bytes(data).hex()
    if prefix:
        hex_str = f"0x{hex_str}"
    return HexStr(hex_str)


def sha256(data: bytes) -> bytes:
    """Perform a single SHA256 hash."""
    return hashlib.sha256(data).digest()


def double_sha256(data: bytes) -> bytes:
    """Perform double SHA256 hash."""
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    """Perform RIPEMD160(SHA256(data))."""
    return RIPEMD160.new(sha256(data)).digest()


def encode_base58(data: bytes) -> str:
    """
    Encode bytes as Base58 string.

    Args:
        data: Bytes to encode

    Returns:
        Base58 encoded string
    """
    n = int.from_bytes(data, "big")

    encoded = ""
    while n:
        n, remainder = divmod(n, 58)
        encoded = BASE58_ALPHABET[remainder] + encoded

    # Leading zero bytes map to leading '1's
    for byte in data:
        if byte != 0:
            break
        encoded = "1" + encoded

    return encoded


def encode_base58_check(data: bytes) -> str:
    """Encode bytes as Base58Check (4-byte double SHA256 checksum)."""
    return encode_base58(data + double_sha256(data)[:4])


def convert_bits(data: Union[bytes, List[int]], from_bits: int, to_bits: int, pad: bool = True) -> List[int]:
    """
    Regroup a sequence of ``from_bits``-wide values into ``to_bits``-wide values.

    Args:
        data: Input values
        from_bits: Width of each input value
        to_bits: Width of each output value
        pad: Zero-pad a trailing partial group instead of rejecting it

    Returns:
        List of regrouped values

    Raises:
        ValueError: If an input value is out of range, or padding is
            invalid when ``pad`` is false
    """
    acc = 0
    bits = 0
    result = []
    max_value = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1

    for value in data:
        if value < 0 or value >> from_bits:
            raise ValueError(f"Value {value} does not fit in {from_bits} bits")
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            result.append((acc >> bits) & max_value)

    if pad:
        if bits:
            result.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or ((acc << (to_bits - bits)) & max_value):
        raise ValueError("Invalid padding in bit conversion")

    return result


def _bech32_polymod(values: List[int]) -> int:
    """Compute Bech32 checksum polymod."""
    generator = [0x3b6a57b2, 0x26508e6d, 0x1ea119fa, 0x3d4233dd, 0x2a1462b3]
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1ffffff) << 5 ^ value
        for i in range(5):
            chk ^= generator[i] if ((top >> i) & 1) else 0
    return chk


def _bech32_hrp_expand(hrp: str) -> List[int]:
    """Expand human-readable part for Bech32."""
    return [ord(x) >> 5 for x in hrp] + [0] + [ord(x) & 31 for x in hrp]


def _normalize_hrp(hrp: str) -> str:
    """Check the human-readable part and return it in lowercase."""
    if not 1 <= len(hrp) <= BECH32_MAX_HRP_LENGTH:
        raise AddressEncodingFailed(
            f"Invalid human readable part: length {len(hrp)} is outside 1..{BECH32_MAX_HRP_LENGTH}"
        )
    for position, char in enumerate(hrp):
        if not 33 <= ord(char) <= 126:
            raise AddressEncodingFailed(
                f"Invalid human readable part: character at position {position} is outside ASCII 33..126"
            )
    if hrp.lower() != hrp and hrp.upper() != hrp:
        raise AddressEncodingFailed(f"Invalid human readable part {hrp!r}: mixed case")
    return hrp.lower()


def encode_bech32(hrp: str, data: bytes) -> str:
    """
    Encode raw bytes as a Bech32 string.

    Unlike SegWit addresses, no witness version is prepended: the payload is
    the 5-bit regrouping of ``data`` alone.

    Args:
        hrp: Human-readable part
        data: Payload bytes

    Returns:
        Bech32 encoded string in lowercase

    Raises:
        AddressEncodingFailed: If the human-readable part is invalid
    """
    hrp = _normalize_hrp(hrp)
    values = convert_bits(data, 8, 5)

    polymod = _bech32_polymod(_bech32_hrp_expand(hrp) + values + [0] * BECH32_CHECKSUM_LENGTH) ^ BECH32_CONST
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(BECH32_CHECKSUM_LENGTH)]

    return hrp + "1" + "".join(BECH32_CHARSET[v] for v in values + checksum)


def decode_bech32(address: str) -> Tuple[str, bytes]:
    """
    Decode a Bech32 string.

    Args:
        address: Bech32 string

    Returns:
        Tuple of (hrp, payload bytes)

    Raises:
        AddressEncodingFailed: If the string is malformed or the checksum fails
    """
    if address.lower() != address and address.upper() != address:
        raise AddressEncodingFailed("Invalid Bech32 string: mixed case")
    address = address.lower()

    pos = address.rfind("1")
    if pos < 1:
        raise AddressEncodingFailed("Invalid Bech32 string: no separator")
    if pos + 1 + BECH32_CHECKSUM_LENGTH > len(address):
        raise AddressEncodingFailed("Invalid Bech32 string: checksum too short")

    hrp = _normalize_hrp(address[:pos])
    values = []
    for char in address[pos + 1:]:
        index = BECH32_CHARSET.find(char)
        if index < 0:
            raise AddressEncodingFailed(f"Invalid Bech32 character: {char!r}")
        values.append(index)

    if _bech32_polymod(_bech32_hrp_expand(hrp) + values) != BECH32_CONST:
        raise AddressEncodingFailed("Invalid Bech32 checksum")

    try:
        payload = convert_bits(values[:-BECH32_CHECKSUM_LENGTH], 5, 8, pad=False)
    except ValueError as e:
        raise AddressEncodingFailed(f"Invalid Bech32 payload: {e}") from e

    return hrp, bytes(payload)


def public_key_to_address(public_key: bytes, hrp: str) -> Address:
    """
    Derive the account address of a compressed secp256k1 public key.

    Args:
        public_key: 33-byte compressed public key
        hrp: Human-readable prefix of the target chain

    Returns:
        Bech32 address of RIPEMD160(SHA256(public_key))
    """
    return Address(encode_bech32(hrp, hash160(bytes(public_key))))
