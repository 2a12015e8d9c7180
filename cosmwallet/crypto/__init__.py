"""Cryptographic utilities for cosmwallet."""

from ..crypto.bip39 import generate_mnemonic, is_valid_mnemonic, mnemonic_to_seed, validate_mnemonic
from ..crypto.hd import DerivationPath, ExtendedPublicKey, HDNode, Keychain
from ..crypto.keys import PrivateKey, PublicKey
from ..crypto.signature import (
    compact_to_der,
    der_to_compact,
    encode_der_signature,
    is_low_s,
    parse_der_signature,
)

__all__ = [
    # Mnemonics
    "generate_mnemonic",
    "validate_mnemonic",
    "is_valid_mnemonic",
    "mnemonic_to_seed",

    # HD derivation
    "DerivationPath",
    "HDNode",
    "ExtendedPublicKey",
    "Keychain",

    # Keys
    "PrivateKey",
    "PublicKey",

    # Signatures
    "parse_der_signature",
    "encode_der_signature",
    "der_to_compact",
    "compact_to_der",
    "is_low_s",
]
