"""Base provider interface for cosmwallet."""

from abc import ABC, abstractmethod
import logging

from ..constants import BroadcastMode
from ..types.account import AccountInfo, BroadcastResult

__all__ = ["BaseProvider"]


class BaseProvider(ABC):
    """
    Abstract base provider for chain access.

    The core never performs network I/O itself. Callers implement this
    interface on top of whatever transport they use (gRPC, LCD REST, an
    in-memory fake in tests) and hand it to :class:`cosmwallet.client.Signer`.
    """

    def __init__(self) -> None:
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @abstractmethod
    async def fetch_account(self, address: str) -> AccountInfo:
        """
        Look up the account number and sequence of ``address``.

        Args:
            address: Bech32 account address

        Returns:
            AccountInfo for the address

        Raises:
            ProviderError: If the lookup fails or the account does not exist
        """
        raise NotImplementedError

    @abstractmethod
    async def broadcast(self, tx_bytes: bytes, mode: BroadcastMode) -> BroadcastResult:
        """
        Submit an encoded ``TxRaw`` to the network.

        Args:
            tx_bytes: Signed transaction wire bytes
            mode: How long the node should wait before answering

        Returns:
            Node's answer, passed through untouched

        Raises:
            ProviderError: If the transaction cannot be submitted
        """
        raise NotImplementedError

    async def connect(self) -> None:
        """Open the underlying transport. Does nothing by default."""

    async def disconnect(self) -> None:
        """Close the underlying transport. Does nothing by default."""

    async def __aenter__(self) -> "BaseProvider":
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.disconnect()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"
