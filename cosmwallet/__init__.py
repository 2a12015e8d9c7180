"""
cosmwallet

Client-side wallet and transaction signing for Cosmos SDK chains: BIP39
mnemonics, BIP32 key derivation, bech32 addresses and SIGN_MODE_DIRECT
transactions, with no network access of its own.
"""

from .client import Signer
from .constants import BroadcastMode, Chain, ChainConfig, SignMode
from .exceptions import (
    CosmWalletError,
    ErrorCode,
    MnemonicInvalid,
    DerivationPathInvalid,
    KeyDerivationFailed,
    SignatureFailed,
    AddressEncodingFailed,
    MissingAccountContext,
    MissingFee,
    EncodingFailed,
    ProviderError,
)
from .providers import BaseProvider
from .crypto import DerivationPath, PrivateKey, PublicKey
from .modules import MnemonicWallet, MsgSend
from .types import AccountInfo, Address, BroadcastResult
from .types.transaction import (
    AccountContext,
    Coin,
    Fee,
    Message,
    SignedTransaction,
    TxBuilder,
)

__version__ = "0.1.0"

__all__ = [
    # Main client
    "Signer",

    # Configuration
    "Chain",
    "ChainConfig",
    "SignMode",
    "BroadcastMode",

    # Providers
    "BaseProvider",

    # Exceptions
    "CosmWalletError",
    "ErrorCode",
    "MnemonicInvalid",
    "DerivationPathInvalid",
    "KeyDerivationFailed",
    "SignatureFailed",
    "AddressEncodingFailed",
    "MissingAccountContext",
    "MissingFee",
    "EncodingFailed",
    "ProviderError",

    # Wallet and crypto
    "MnemonicWallet",
    "DerivationPath",
    "PrivateKey",
    "PublicKey",

    # Transactions
    "TxBuilder",
    "Message",
    "Coin",
    "Fee",
    "AccountContext",
    "SignedTransaction",
    "MsgSend",

    # Types
    "Address",
    "AccountInfo",
    "BroadcastResult",
]


def connect(
    provider: BaseProvider,
    mnemonic: str,
    chain_id: str,
    chain: Chain = Chain.COSMOS,
    **overrides
) -> Signer:
    """
    Create a signer for a preset chain.

    Args:
        provider: Chain access used for account lookup and broadcast
        mnemonic: BIP39 phrase of the signing wallet
        chain_id: Network chain identifier
        chain: Preset providing prefix, derivation path and fee denom
        **overrides: Any other :class:`ChainConfig` field

    Returns:
        Signer whose wallet is derived at the configured path

    Example:
        >>> signer = cosmwallet.connect(provider, phrase, "morpheus-apollo-2", Chain.DESMOS)
        >>> signer.address
        'desmos1...'
    """
    config = ChainConfig.for_chain(chain, chain_id, **overrides)
    wallet = MnemonicWallet(mnemonic, config.derivation_path)
    return Signer(wallet, provider, config)
