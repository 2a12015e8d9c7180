"""
Host-language binding surface.

Each function takes plain values and returns a plain dict. Core errors never
cross this boundary as exceptions; they come back as::

    {"error": {"code": <int>, "name": <str>, "message": <str>}}

Argument errors (``None`` or a wrong type) use code ``0`` and the name
``InvalidArgument``. Anything else is reported with code ``-1`` and the
name ``InternalError``; its message carries only the exception type.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict

from .crypto.bip39 import generate_mnemonic
from .exceptions import CosmWalletError
from .modules.wallet import MnemonicWallet

__all__ = [
    "INVALID_ARGUMENT_CODE",
    "INTERNAL_ERROR_CODE",
    "random_mnemonic",
    "derive_account",
    "wallet_from_mnemonic",
    "wallet_sign",
]

logger = logging.getLogger(__name__)

INVALID_ARGUMENT_CODE = 0
INTERNAL_ERROR_CODE = -1

Result = Dict[str, Any]


def _error(code: int, name: str, message: str) -> Result:
    return {"error": {"code": code, "name": name, "message": message}}


def _boundary(func: Callable[..., Result]) -> Callable[..., Result]:
    """Translate exceptions raised by ``func`` into error dicts."""
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Result:
        try:
            return func(*args, **kwargs)
        except CosmWalletError as e:
            logger.debug(f"{func.__name__} failed: {e}")
            return {"error": e.to_dict()}
        except (TypeError, ValueError) as e:
            logger.debug(f"{func.__name__} rejected its arguments: {e}")
            return _error(INVALID_ARGUMENT_CODE, "InvalidArgument", str(e))
        except Exception as e:
            logger.error(f"{func.__name__} failed unexpectedly: {type(e).__name__}")
            return _error(INTERNAL_ERROR_CODE, "InternalError", f"Unexpected {type(e).__name__}")

    return wrapper


def _require(value: Any, name: str, *kinds: type) -> None:
    if value is None:
        raise ValueError(f"{name} is required")
    if not isinstance(value, kinds):
        expected = " or ".join(kind.__name__ for kind in kinds)
        raise TypeError(f"{name} must be {expected}, got {type(value).__name__}")


def random_mnemonic() -> str:
    """Generate a fresh 24-word phrase."""
    return generate_mnemonic()


@_boundary
def derive_account(mnemonic: str, derivation_path: str, hrp: str) -> Result:
    """
    Derive the address and public key for a phrase without keeping a wallet.

    Returns:
        ``{"address": str, "public_key_hex": str}`` or an error dict
    """
    _require(mnemonic, "mnemonic", str)
    _require(derivation_path, "derivation_path", str)
    _require(hrp, "hrp", str)

    with MnemonicWallet(mnemonic, derivation_path) as wallet:
        return {
            "address": wallet.address(hrp),
            "public_key_hex": wallet.public_key_hex(),
        }


@_boundary
def wallet_from_mnemonic(mnemonic: str, derivation_path: str) -> Result:
    """
    Open a wallet handle.

    The host owns the returned wallet and should call ``close()`` on it.

    Returns:
        ``{"wallet": MnemonicWallet}`` or an error dict
    """
    _require(mnemonic, "mnemonic", str)
    _require(derivation_path, "derivation_path", str)
    return {"wallet": MnemonicWallet(mnemonic, derivation_path)}


@_boundary
def wallet_sign(wallet: MnemonicWallet, data: bytes) -> Result:
    """
    Sign ``data`` with a wallet handle.

    Returns:
        ``{"signature": bytes}`` (empty for empty data) or an error dict
    """
    _require(wallet, "wallet", MnemonicWallet)
    _require(data, "data", bytes, bytearray)
    return {"signature": wallet.sign(bytes(data))}
