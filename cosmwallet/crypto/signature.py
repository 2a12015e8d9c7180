"""Signature encoding utilities for cosmwallet.

Cosmos chains carry ECDSA signatures as a fixed 64-byte ``r || s`` buffer,
while libsecp256k1 bindings speak DER. These helpers convert between the two.
"""

from typing import Tuple

from ..constants import SECP256K1_ORDER, SIGNATURE_LENGTH
from ..exceptions import SignatureFailed

__all__ = [
    "parse_der_signature",
    "encode_der_signature",
    "der_to_compact",
    "compact_to_der",
    "is_low_s",
]


def parse_der_signature(signature: bytes) -> Tuple[int, int]:
    """
    Parse DER-encoded signature.

    Args:
        signature: DER-encoded ECDSA signature

    Returns:
        Tuple of (r, s)

    Raises:
        SignatureFailed: If signature format is invalid
    """
    try:
        if signature[0] != 0x30:
            raise ValueError("missing sequence tag")

        length = signature[1]
        if length + 2 != len(signature):
            raise ValueError("incorrect length")

        if signature[2] != 0x02:
            raise ValueError("missing r integer tag")
        r_length = signature[3]
        r_bytes = signature[4:4 + r_length]
        if len(r_bytes) != r_length or r_length == 0:
            raise ValueError("truncated r value")
        r = int.from_bytes(r_bytes, "big")

        s_offset = 4 + r_length
        if signature[s_offset] != 0x02:
            raise ValueError("missing s integer tag")
        s_length = signature[s_offset + 1]
        s_bytes = signature[s_offset + 2:s_offset + 2 + s_length]
        if len(s_bytes) != s_length or s_length == 0:
            raise ValueError("truncated s value")
        if s_offset + 2 + s_length != len(signature):
            raise ValueError("trailing bytes")
        s = int.from_bytes(s_bytes, "big")

        return r, s

    except (IndexError, ValueError) as e:
        raise SignatureFailed(f"Invalid DER signature: {e}") from e


def encode_der_signature(r: int, s: int) -> bytes:
    """
    Encode signature as DER.

    Args:
        r: Signature r value
        s: Signature s value

    Returns:
        DER-encoded signature
    """
    def _encode_integer(value: int) -> bytes:
        value_bytes = value.to_bytes(max(1, (value.bit_length() + 7) // 8), "big")
        if value_bytes[0] & 0x80:
            value_bytes = b"\x00" + value_bytes
        return b"\x02" + bytes([len(value_bytes)]) + value_bytes

    sequence = _encode_integer(r) + _encode_integer(s)
    return b"\x30" + bytes([len(sequence)]) + sequence


def der_to_compact(signature: bytes) -> bytes:
    """
    Convert a DER signature to the raw 64-byte ``r || s`` form.

    Raises:
        SignatureFailed: If the DER is malformed or r/s exceed 32 bytes
    """
    r, s = parse_der_signature(signature)
    half = SIGNATURE_LENGTH // 2
    try:
        return r.to_bytes(half, "big") + s.to_bytes(half, "big")
    except OverflowError as e:
        raise SignatureFailed("Signature component does not fit in 32 bytes") from e


def compact_to_der(signature: bytes) -> bytes:
    """
    Convert a raw 64-byte ``r || s`` signature to DER.

    Raises:
        SignatureFailed: If the signature is not 64 bytes
    """
    if len(signature) != SIGNATURE_LENGTH:
        raise SignatureFailed(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
    half = SIGNATURE_LENGTH // 2
    r = int.from_bytes(signature[:half], "big")
    s = int.from_bytes(signature[half:], "big")
    return encode_der_signature(r, s)


def is_low_s(signature: bytes) -> bool:
    """Check that the ``s`` half of an ``r || s`` signature is canonical (``s <= n/2``)."""
    s = int.from_bytes(signature[SIGNATURE_LENGTH // 2:], "big")
    return 0 < s <= SECP256K1_ORDER // 2
