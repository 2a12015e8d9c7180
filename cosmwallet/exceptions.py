"""Cosmwallet exceptions hierarchy."""

from enum import IntEnum
from typing import Any, Dict, Optional

__all__ = [
    "ErrorCode",
    "CosmWalletError",
    "MnemonicInvalid",
    "DerivationPathInvalid",
    "KeyDerivationFailed",
    "SignatureFailed",
    "AddressEncodingFailed",
    "MissingAccountContext",
    "MissingFee",
    "EncodingFailed",
    "ProviderError",
]


class ErrorCode(IntEnum):
    """Stable numeric codes for every error the core can raise."""
    MNEMONIC_INVALID = 1
    DERIVATION_PATH_INVALID = 2
    KEY_DERIVATION_FAILED = 3
    SIGNATURE_FAILED = 4
    ADDRESS_ENCODING_FAILED = 5
    MISSING_ACCOUNT_CONTEXT = 6
    MISSING_FEE = 7
    ENCODING_FAILED = 8


class CosmWalletError(Exception):
    """
    Base exception for all core errors.

    Subclasses pin ``code`` to one member of :class:`ErrorCode`, so the set
    of codes a caller can observe is closed.
    """

    code: ErrorCode

    def __init__(self, message: str, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return f"[{int(self.code)}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """
        Translate the error into a plain ``{code, name, message}`` mapping.

        Returns:
            Dict safe to hand across a host-language boundary
        """
        return {
            "code": int(self.code),
            "name": type(self).__name__,
            "message": self.message,
        }


class MnemonicInvalid(CosmWalletError):
    """Raised when a recovery phrase fails word-count, wordlist or checksum checks."""
    code = ErrorCode.MNEMONIC_INVALID


class DerivationPathInvalid(CosmWalletError):
    """Raised when a derivation path is not syntactically valid."""
    code = ErrorCode.DERIVATION_PATH_INVALID


class KeyDerivationFailed(CosmWalletError):
    """Raised when an elliptic-curve derivation step fails."""
    code = ErrorCode.KEY_DERIVATION_FAILED


class SignatureFailed(CosmWalletError):
    """Raised when the signer fails internally."""
    code = ErrorCode.SIGNATURE_FAILED


class AddressEncodingFailed(CosmWalletError):
    """Raised when a bech32 address cannot be encoded or decoded."""
    code = ErrorCode.ADDRESS_ENCODING_FAILED


class MissingAccountContext(CosmWalletError):
    """Raised when a transaction is signed without account number and sequence."""
    code = ErrorCode.MISSING_ACCOUNT_CONTEXT

    def __init__(self, message: str = "Missing account information") -> None:
        super().__init__(message)


class MissingFee(CosmWalletError):
    """Raised when a transaction is signed without a fee."""
    code = ErrorCode.MISSING_FEE

    def __init__(self, message: str = "Missing transaction fee") -> None:
        super().__init__(message)


class EncodingFailed(CosmWalletError):
    """Raised when protobuf encoding or decoding fails."""
    code = ErrorCode.ENCODING_FAILED


class ProviderError(Exception):
    """
    Raised by provider implementations when account lookup or broadcast fails.

    Providers are supplied by the caller, so this error is not part of the
    core's closed :class:`ErrorCode` set.
    """

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"[{self.status}] {self.message}"
        return self.message
