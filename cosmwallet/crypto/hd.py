"""Hierarchical Deterministic key derivation for cosmwallet."""

import hashlib
import hmac
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Tuple, Union

from ..constants import BIP32_SEED_KEY, HARDENED_OFFSET, SECP256K1_ORDER, XPUB_VERSION
from ..exceptions import DerivationPathInvalid, KeyDerivationFailed
from ..types.common import PublicKeyBytes
from ..utils.encoding import encode_base58_check, hash160
from .keys import PrivateKey

__all__ = ["PathLevel", "DerivationPath", "HDNode", "ExtendedPublicKey", "Keychain"]

_LEVEL_PATTERN = re.compile(r"([0-9]+)(['hH]?)")


@dataclass(frozen=True)
class PathLevel:
    """One level of a derivation path."""
    index: int
    hardened: bool = False

    @property
    def child_number(self) -> int:
        """Index as used by CKD, with the hardened offset applied."""
        return self.index + HARDENED_OFFSET if self.hardened else self.index

    def __str__(self) -> str:
        return f"{self.index}'" if self.hardened else str(self.index)


@dataclass(frozen=True)
class DerivationPath:
    """
    Parsed BIP32 derivation path such as ``m/44'/118'/0'/0/0``.

    A pure syntactic value: two paths are equal when their levels are.
    """
    levels: Tuple[PathLevel, ...] = ()

    @classmethod
    def parse(cls, path: Union[str, "DerivationPath"]) -> "DerivationPath":
        """
        Parse a textual path.

        ``'``, ``h`` and ``H`` all mark a hardened level.

        Raises:
            DerivationPathInvalid: If the path is empty, lacks the ``m`` root,
                or has a malformed or out-of-range component
        """
        if isinstance(path, DerivationPath):
            return path
        if not isinstance(path, str) or not path.strip():
            raise DerivationPathInvalid("Invalid derivation path: path is empty")

        components = path.strip().split("/")
        if components[0] != "m":
            raise DerivationPathInvalid(f"Invalid derivation path {path!r}: must start with 'm'")

        levels = []
        for position, component in enumerate(components[1:], start=1):
            match = _LEVEL_PATTERN.fullmatch(component)
            if match is None:
                raise DerivationPathInvalid(
                    f"Invalid derivation path {path!r}: bad component at level {position}"
                )
            index = int(match.group(1))
            if index >= HARDENED_OFFSET:
                raise DerivationPathInvalid(
                    f"Invalid derivation path {path!r}: index at level {position} is out of range"
                )
            levels.append(PathLevel(index, bool(match.group(2))))

        return cls(tuple(levels))

    def __iter__(self) -> Iterator[PathLevel]:
        return iter(self.levels)

    def __len__(self) -> int:
        return len(self.levels)

    def __str__(self) -> str:
        return "/".join(["m"] + [str(level) for level in self.levels])


class HDNode:
    """HD wallet node (BIP32), private derivation only."""

    def __init__(
        self,
        private_key: Union[bytes, bytearray],
        chain_code: Union[bytes, bytearray],
        depth: int = 0,
        parent_fingerprint: bytes = b"\x00\x00\x00\x00",
        index: int = 0,
    ):
        self._private_key = PrivateKey(private_key)
        self._chain_code = bytearray(chain_code)
        self._public_key: Optional[PublicKeyBytes] = None
        self.depth = depth
        self.parent_fingerprint = parent_fingerprint
        self.index = index

    @classmethod
    def from_seed(cls, seed: bytes) -> "HDNode":
        """Create master node from seed."""
        if not 16 <= len(seed) <= 64:
            raise KeyDerivationFailed(f"Seed must be between 16 and 64 bytes, got {len(seed)}")

        h = hmac.new(BIP32_SEED_KEY, bytes(seed), hashlib.sha512).digest()

        key_int = int.from_bytes(h[:32], "big")
        if key_int == 0 or key_int >= SECP256K1_ORDER:
            raise KeyDerivationFailed("Invalid master key")

        return cls(private_key=h[:32], chain_code=h[32:])

    @property
    def private_key(self) -> PrivateKey:
        return self._private_key

    @property
    def chain_code(self) -> bytes:
        return bytes(self._chain_code)

    @property
    def public_key(self) -> PublicKeyBytes:
        """Compressed public key of this node."""
        if self._public_key is None:
            self._public_key = self._private_key.public_key().point
        return self._public_key

    def fingerprint(self) -> bytes:
        return hash160(self.public_key)[:4]

    def derive(self, index: int) -> "HDNode":
        """
        Derive child node (CKDpriv).

        Args:
            index: Child number; values at or above ``2**31`` are hardened

        Raises:
            KeyDerivationFailed: If the child key is invalid (probability
                below 2**-127; BIP32 says to move to the next index)
        """
        if not 0 <= index < 1 << 32:
            raise KeyDerivationFailed(f"Child index out of range: {index}")

        if index >= HARDENED_OFFSET:
            data = b"\x00" + self._private_key.secret + index.to_bytes(4, "big")
        else:
            data = self.public_key + index.to_bytes(4, "big")

        h = hmac.new(bytes(self._chain_code), data, hashlib.sha512).digest()

        tweak = int.from_bytes(h[:32], "big")
        if tweak >= SECP256K1_ORDER:
            raise KeyDerivationFailed(f"Derived tweak out of range at index {index}")
        child_int = (int.from_bytes(self._private_key.secret, "big") + tweak) % SECP256K1_ORDER
        if child_int == 0:
            raise KeyDerivationFailed(f"Derived zero key at index {index}")

        return HDNode(
            private_key=child_int.to_bytes(32, "big"),
            chain_code=h[32:],
            depth=self.depth + 1,
            parent_fingerprint=self.fingerprint(),
            index=index,
        )

    def derive_path(self, path: Union[str, DerivationPath]) -> "HDNode":
        """Derive using BIP32 path like m/44'/118'/0'/0/0."""
        node = self
        try:
            for level in DerivationPath.parse(path):
                child = node.derive(level.child_number)
                if node is not self:
                    node.wipe()
                node = child
        except Exception:
            if node is not self:
                node.wipe()
            raise
        return node

    def extended_public_key(self) -> str:
        """
        Serialize the public half of this node as a BIP32 ``xpub`` string.

        Returns:
            Base58Check encoded extended public key
        """
        if self.depth > 255:
            raise KeyDerivationFailed("Depth too large to serialize")
        payload = (
            XPUB_VERSION
            + bytes([self.depth])
            + self.parent_fingerprint
            + self.index.to_bytes(4, "big")
            + bytes(self._chain_code)
            + self.public_key
        )
        return encode_base58_check(payload)

    def wipe(self) -> None:
        """Zero the private key and chain code buffers."""
        self._private_key.wipe()
        for i in range(len(self._chain_code)):
            self._chain_code[i] = 0

    def __repr__(self) -> str:
        return f"HDNode(depth={self.depth}, index={self.index}, public_key={self.public_key.hex()})"


@dataclass(frozen=True)
class ExtendedPublicKey:
    """Public view of a keychain node, safe to share."""
    public_key: PublicKeyBytes
    chain_code: bytes
    xpub: str


class Keychain:
    """
    Extended private/public key pair derived for one (seed, path).

    Derivation is a pure function of its inputs: the same seed and path
    always give bit-identical keys.
    """

    def __init__(self, ext_private_key: HDNode) -> None:
        self.ext_private_key = ext_private_key
        self.ext_public_key = ExtendedPublicKey(
            public_key=ext_private_key.public_key,
            chain_code=ext_private_key.chain_code,
            xpub=ext_private_key.extended_public_key(),
        )

    @classmethod
    def derive(cls, seed: bytes, path: Union[str, DerivationPath]) -> "Keychain":
        """
        Derive the keychain at ``path`` from ``seed``.

        Raises:
            DerivationPathInvalid: If the path is malformed
            KeyDerivationFailed: If a derivation step fails
        """
        path = DerivationPath.parse(path)
        master = HDNode.from_seed(seed)
        try:
            node = master.derive_path(path)
        finally:
            if path.levels:
                master.wipe()
        return cls(node)

    @property
    def public_key(self) -> PublicKeyBytes:
        return self.ext_public_key.public_key

    @property
    def private_key(self) -> PrivateKey:
        return self.ext_private_key.private_key

    def wipe(self) -> None:
        self.ext_private_key.wipe()
