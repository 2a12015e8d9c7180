"""Protocol constants and chain configuration for cosmwallet."""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Mapping

__all__ = [
    "Chain",
    "ChainConfig",
    "SignMode",
    "BroadcastMode",
    "SECP256K1_ORDER",
    "HARDENED_OFFSET",
    "BIP32_SEED_KEY",
    "BIP39_STRENGTHS",
    "BIP39_WORD_COUNTS",
    "DEFAULT_MNEMONIC_STRENGTH",
    "SECP256K1_PUBKEY_TYPE_URL",
    "COSMOS_DERIVATION_PATH",
    "DESMOS_DERIVATION_PATH",
    "XPUB_VERSION",
    "SIGNATURE_LENGTH",
    "ADDRESS_DIGEST_LENGTH",
]

# secp256k1 group order
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

# BIP32
HARDENED_OFFSET = 0x80000000
BIP32_SEED_KEY = b"Bitcoin seed"
XPUB_VERSION = bytes.fromhex("0488b21e")

# BIP39
BIP39_STRENGTHS = (128, 160, 192, 224, 256)
BIP39_WORD_COUNTS = (12, 15, 18, 21, 24)
DEFAULT_MNEMONIC_STRENGTH = 256

SIGNATURE_LENGTH = 64
ADDRESS_DIGEST_LENGTH = 20

SECP256K1_PUBKEY_TYPE_URL = "/cosmos.crypto.secp256k1.PubKey"

COSMOS_DERIVATION_PATH = "m/44'/118'/0'/0/0"
DESMOS_DERIVATION_PATH = "m/44'/852'/0'/0/0"


class SignMode(IntEnum):
    """Cosmos SDK signing modes."""
    UNSPECIFIED = 0
    DIRECT = 1
    TEXTUAL = 2
    DIRECT_AUX = 3
    LEGACY_AMINO_JSON = 127


class BroadcastMode(IntEnum):
    """Cosmos SDK broadcast modes, numbered as in ``cosmos.tx.v1beta1``."""
    UNSPECIFIED = 0
    BLOCK = 1
    SYNC = 2
    ASYNC = 3


class Chain(Enum):
    """Known chain presets as ``(hrp, derivation_path, fee_denom)``."""
    COSMOS = ("cosmos", COSMOS_DERIVATION_PATH, "uatom")
    DESMOS = ("desmos", DESMOS_DERIVATION_PATH, "udsm")

    @property
    def hrp(self) -> str:
        return self.value[0]

    @property
    def derivation_path(self) -> str:
        return self.value[1]

    @property
    def fee_denom(self) -> str:
        return self.value[2]


@dataclass(frozen=True)
class ChainConfig:
    """
    Explicit per-chain settings passed to :class:`cosmwallet.client.Signer`.

    Attributes:
        chain_id: Chain identifier included in every sign doc
        hrp: Bech32 human-readable prefix for addresses
        derivation_path: Default BIP32 path for wallets on this chain
        fee_denom: Denomination used for default fees
        gas_limit: Default gas limit
        fee_amount: Default fee amount, as an integer string
    """
    chain_id: str
    hrp: str
    derivation_path: str = COSMOS_DERIVATION_PATH
    fee_denom: str = "stake"
    gas_limit: int = 200_000
    fee_amount: str = "0"

    @classmethod
    def for_chain(cls, chain: Chain, chain_id: str, **overrides: Any) -> "ChainConfig":
        """
        Build configuration from a preset.

        Args:
            chain: Preset providing hrp, path and denom
            chain_id: Network chain identifier
            **overrides: Any other field to replace

        Returns:
            New ChainConfig instance
        """
        values = {
            "chain_id": chain_id,
            "hrp": chain.hrp,
            "derivation_path": chain.derivation_path,
            "fee_denom": chain.fee_denom,
        }
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChainConfig":
        """
        Build configuration from plain data, e.g. a parsed settings file.

        Unknown keys are rejected so that typos do not pass silently.

        Raises:
            ValueError: If required keys are missing or unknown keys are present
        """
        known = set(cls.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown chain config keys: {', '.join(sorted(unknown))}")
        missing = {"chain_id", "hrp"} - set(data)
        if missing:
            raise ValueError(f"Missing chain config keys: {', '.join(sorted(missing))}")
        values = dict(data)
        if "gas_limit" in values:
            values["gas_limit"] = int(values["gas_limit"])
        return cls(**values)
