"""secp256k1 key management for cosmwallet."""

import hashlib
from typing import Union

from coincurve import PrivateKey as SecpPrivateKey, PublicKey as SecpPublicKey

from ..exceptions import KeyDerivationFailed, SignatureFailed
from ..types.common import Address, PublicKeyBytes, Signature
from ..utils.encoding import hash160, public_key_to_address
from ..utils.validation import validate_private_key, validate_public_key
from .signature import compact_to_der, der_to_compact

__all__ = ["PrivateKey", "PublicKey"]


class PrivateKey:
    """
    secp256k1 private key wrapper.

    The scalar is kept in a ``bytearray`` so it can be zeroed in place with
    :meth:`wipe`. The coincurve key object is built for each signature and
    dropped right after.
    """

    def __init__(self, key: Union[bytes, bytearray, str]) -> None:
        """
        Initialize private key.

        Args:
            key: Private key as 32 bytes or hex string

        Raises:
            KeyDerivationFailed: If the key is not a valid scalar
        """
        self._secret = bytearray(validate_private_key(key))

    @property
    def secret(self) -> bytes:
        """Get private key as bytes."""
        self._check_alive()
        return bytes(self._secret)

    def public_key(self) -> "PublicKey":
        """
        Get corresponding compressed public key.

        Returns:
            PublicKey instance
        """
        self._check_alive()
        point = SecpPrivateKey(bytes(self._secret)).public_key.format(compressed=True)
        return PublicKey(point)

    def sign(self, data: bytes) -> Signature:
        """
        Sign SHA256(data) with RFC 6979 deterministic ECDSA.

        libsecp256k1 always emits low-S signatures, so the result is the
        canonical form Cosmos nodes accept.

        Args:
            data: Message bytes; hashed here, not by the caller

        Returns:
            64-byte big-endian ``r || s`` signature

        Raises:
            SignatureFailed: If signing fails
        """
        self._check_alive()
        digest = hashlib.sha256(data).digest()
        try:
            der = SecpPrivateKey(bytes(self._secret)).sign(digest, hasher=None)
        except Exception as e:
            raise SignatureFailed(f"Signing failed: {e}") from e
        return Signature(der_to_compact(der))

    def wipe(self) -> None:
        """Overwrite the secret with zeros; the key is unusable afterwards."""
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._secret = bytearray()

    @property
    def is_wiped(self) -> bool:
        return not self._secret

    def _check_alive(self) -> None:
        if not self._secret:
            raise ValueError("Private key has been wiped")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PrivateKey):
            return False
        return self._secret == other._secret

    def __repr__(self) -> str:
        return "PrivateKey(<redacted>)"


class PublicKey:
    """
    Compressed secp256k1 public key wrapper.

    Handles address generation and signature verification.
    """

    def __init__(self, key: Union[bytes, bytearray, str, "PublicKey"]) -> None:
        """
        Initialize public key.

        Args:
            key: 33-byte compressed key, hex string, or another PublicKey

        Raises:
            KeyDerivationFailed: If the key is malformed or not on the curve
        """
        if isinstance(key, PublicKey):
            self._point = key._point
            self._key = key._key
            return

        key_bytes = validate_public_key(key)
        try:
            self._key = SecpPublicKey(key_bytes)
        except ValueError as e:
            raise KeyDerivationFailed(f"Public key is not a valid curve point: {e}") from e
        self._point = PublicKeyBytes(key_bytes)

    @property
    def point(self) -> PublicKeyBytes:
        """Get public key as 33 bytes."""
        return self._point

    def hex(self) -> str:
        """Get public key as hex string."""
        return self._point.hex()

    def hash160(self) -> bytes:
        """Get RIPEMD160(SHA256(point))."""
        return hash160(self._point)

    def address(self, hrp: str) -> Address:
        """
        Get the bech32 account address under ``hrp``.

        Raises:
            AddressEncodingFailed: If the prefix is invalid
        """
        return public_key_to_address(self._point, hrp)

    def verify(self, signature: bytes, data: bytes) -> bool:
        """
        Verify an ``r || s`` signature over SHA256(data).

        Args:
            signature: 64-byte signature
            data: Message bytes that were signed

        Returns:
            True if signature is valid
        """
        try:
            der = compact_to_der(bytes(signature))
            return self._key.verify(der, hashlib.sha256(data).digest(), hasher=None)
        except (SignatureFailed, ValueError):
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicKey):
            return False
        return self._point == other._point

    def __hash__(self) -> int:
        return hash(self._point)

    def __repr__(self) -> str:
        return f"PublicKey({self.hex()})"
