"""Mnemonic wallet module for cosmwallet."""

import logging
from typing import Optional, Tuple, Union

from ..constants import DEFAULT_MNEMONIC_STRENGTH
from ..crypto.bip39 import generate_mnemonic, mnemonic_to_seed, validate_mnemonic
from ..crypto.hd import DerivationPath, Keychain
from ..crypto.keys import PublicKey
from ..types.common import Address, HexStr, PublicKeyBytes, Signature
from ..utils.encoding import public_key_to_address

__all__ = ["MnemonicWallet"]


class MnemonicWallet:
    """
    In-memory secp256k1 wallet derived from a BIP39 mnemonic.

    The wallet exclusively owns its phrase, seed and current keychain.
    Instances are not synchronized: callers sharing one wallet across threads
    must serialize :meth:`set_derivation_path` against signing and address
    lookups themselves.

    Example:
        >>> wallet = MnemonicWallet(phrase, "m/44'/118'/0'/0/0")
        >>> wallet.address("cosmos")
        'cosmos1...'
    """

    def __init__(
        self,
        mnemonic: str,
        derivation_path: Union[str, DerivationPath],
        passphrase: str = "",
    ) -> None:
        """
        Derive a key pair from ``mnemonic`` at ``derivation_path``.

        Args:
            mnemonic: BIP39 recovery phrase
            derivation_path: BIP32 path, e.g. ``m/44'/118'/0'/0/0``
            passphrase: Optional BIP39 passphrase

        Raises:
            MnemonicInvalid: If the phrase is invalid
            DerivationPathInvalid: If the path is malformed
            KeyDerivationFailed: If key derivation fails
        """
        self._mnemonic: Optional[str] = validate_mnemonic(mnemonic)
        path = DerivationPath.parse(derivation_path)
        self._seed = bytearray(mnemonic_to_seed(self._mnemonic, passphrase))
        try:
            self._keychain: Optional[Keychain] = Keychain.derive(self._seed, path)
        except Exception:
            for i in range(len(self._seed)):
                self._seed[i] = 0
            self._mnemonic = None
            raise
        self._derivation_path = path
        self._logger = logging.getLogger(f"{__name__}.MnemonicWallet")
        self._logger.debug("Derived wallet at %s", path)

    @classmethod
    def random(
        cls,
        derivation_path: Union[str, DerivationPath],
        strength: int = DEFAULT_MNEMONIC_STRENGTH,
    ) -> Tuple["MnemonicWallet", str]:
        """
        Create a wallet from a freshly generated phrase.

        The phrase is returned so the caller can show it for backup once;
        the wallet does not expose it afterwards.

        Returns:
            Tuple of (wallet, mnemonic phrase)

        Raises:
            DerivationPathInvalid: If the path is malformed
        """
        DerivationPath.parse(derivation_path)
        phrase = generate_mnemonic(strength)
        return cls(phrase, derivation_path), phrase

    @property
    def derivation_path(self) -> str:
        """Current derivation path in canonical text form."""
        return str(self._derivation_path)

    def set_derivation_path(self, derivation_path: Union[str, DerivationPath]) -> None:
        """
        Re-derive the keychain at a new path.

        Does nothing if the path equals the current one. The new keychain is
        fully derived before it replaces the old one, which is then wiped.

        Raises:
            DerivationPathInvalid: If the path is malformed
            KeyDerivationFailed: If key derivation fails
        """
        path = DerivationPath.parse(derivation_path)
        if path == self._derivation_path:
            return

        keychain = Keychain.derive(self._require_seed(), path)
        old_keychain, self._keychain = self._keychain, keychain
        self._derivation_path = path
        if old_keychain is not None:
            old_keychain.wipe()

        self._logger.debug("Derivation path changed to %s", path)

    def public_key(self) -> PublicKeyBytes:
        """Get the current 33-byte compressed public key."""
        return self._require_keychain().public_key

    def public_key_hex(self) -> HexStr:
        return HexStr(self.public_key().hex())

    def extended_public_key(self) -> str:
        """Get the BIP32 ``xpub`` of the current keychain."""
        return self._require_keychain().ext_public_key.xpub

    def address(self, hrp: str) -> Address:
        """
        Get the bech32 address of the current public key.

        Args:
            hrp: Human-readable prefix, e.g. ``cosmos``

        Raises:
            AddressEncodingFailed: If the prefix breaks bech32 rules
        """
        return public_key_to_address(self.public_key(), hrp)

    def sign(self, data: bytes) -> Signature:
        """
        Sign ``data`` with the current private key.

        Empty input gives an empty signature. Transaction sign docs are never
        empty, so this only matters for callers signing arbitrary data.

        Args:
            data: Bytes to sign; SHA256 is applied before signing

        Returns:
            64-byte ``r || s`` signature, or ``b""`` for empty input

        Raises:
            SignatureFailed: If the signer fails internally
        """
        if not data:
            return Signature(b"")
        return self._require_keychain().private_key.sign(bytes(data))

    def verify(self, data: bytes, signature: bytes) -> bool:
        """Check an ``r || s`` signature over ``data`` against the current public key."""
        return PublicKey(self.public_key()).verify(signature, data)

    def close(self) -> None:
        """
        Zero the seed and key buffers and drop the phrase.

        The wallet cannot be used afterwards. Calling ``close`` twice is safe.
        """
        if self._keychain is not None:
            self._keychain.wipe()
            self._keychain = None
        for i in range(len(self._seed)):
            self._seed[i] = 0
        self._seed = bytearray()
        self._mnemonic = None

    @property
    def closed(self) -> bool:
        return self._keychain is None

    def _require_keychain(self) -> Keychain:
        if self._keychain is None:
            raise ValueError("Wallet is closed")
        return self._keychain

    def _require_seed(self) -> bytearray:
        if not self._seed:
            raise ValueError("Wallet is closed")
        return self._seed

    def __enter__(self) -> "MnemonicWallet":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        if self.closed:
            return "MnemonicWallet(closed)"
        return f"MnemonicWallet(path={self.derivation_path}, public_key={self.public_key_hex()})"
