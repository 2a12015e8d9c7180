"""Main cosmwallet client."""

import logging
from typing import Iterable, Optional, Union

from .constants import BroadcastMode, ChainConfig
from .exceptions import ProviderError
from .modules.wallet import MnemonicWallet
from .providers.base import BaseProvider
from .types.account import BroadcastResult
from .types.common import Address
from .types.transaction import AccountContext, Fee, Message, SignedTransaction, TxBuilder

__all__ = ["Signer"]

logger = logging.getLogger(__name__)


class Signer:
    """
    Signs and broadcasts transactions for one wallet on one chain.

    Account lookup and broadcasting go through the caller's provider; all
    encoding and signing happens locally.

    Example:
        >>> config = ChainConfig.for_chain(Chain.DESMOS, "morpheus-apollo-2")
        >>> async with provider:
        ...     signer = Signer(wallet, provider, config)
        ...     result = await signer.send([msg.to_any()], memo="hello")
    """

    def __init__(
        self,
        wallet: MnemonicWallet,
        provider: BaseProvider,
        config: ChainConfig,
    ) -> None:
        """
        Initialize the signer.

        Args:
            wallet: Wallet providing the signing key
            provider: Chain access for account lookup and broadcast
            config: Chain id, address prefix and fee defaults
        """
        self._wallet = wallet
        self._provider = provider
        self._config = config
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        logger.info(
            f"Initialized signer for {config.chain_id} "
            f"with {provider.__class__.__name__}"
        )

    @property
    def wallet(self) -> MnemonicWallet:
        return self._wallet

    @property
    def provider(self) -> BaseProvider:
        return self._provider

    @property
    def config(self) -> ChainConfig:
        return self._config

    @property
    def address(self) -> Address:
        """Wallet address under the configured prefix."""
        return self._wallet.address(self._config.hrp)

    def default_fee(self) -> Fee:
        """Fee built from the configured denom, amount and gas limit."""
        return Fee.single(self._config.fee_denom, self._config.fee_amount, self._config.gas_limit)

    def new_transaction(self) -> TxBuilder:
        """Create a builder preset with the configured chain id."""
        return TxBuilder(self._config.chain_id)

    async def account_context(self) -> AccountContext:
        """
        Fetch the current account number and sequence of the wallet.

        Raises:
            ProviderError: If the provider lookup fails
        """
        address = self.address
        try:
            info = await self._provider.fetch_account(address)
        except ProviderError:
            raise
        except Exception as e:
            self._logger.error(f"Account lookup failed: {e}")
            raise ProviderError(f"Account lookup for {address} failed: {e}") from e

        if info.address and info.address != address:
            raise ProviderError(f"Provider returned account {info.address} for {address}")
        self._logger.debug(
            "Account %s: number=%d sequence=%d", address, info.account_number, info.sequence
        )
        return AccountContext(account_number=info.account_number, sequence=info.sequence)

    async def sign(
        self,
        messages: Iterable[Message],
        fee: Optional[Fee] = None,
        memo: str = "",
        timeout_height: int = 0,
        account: Optional[AccountContext] = None,
    ) -> SignedTransaction:
        """
        Build and sign a transaction.

        Args:
            messages: Messages in execution order
            fee: Fee to pay; defaults to :meth:`default_fee`
            memo: Free-form note
            timeout_height: Block height after which the transaction expires
            account: Account context; fetched from the provider when omitted

        Returns:
            Signed transaction

        Raises:
            ProviderError: If the account lookup fails
            EncodingFailed: If a value cannot be encoded
            SignatureFailed: If signing fails
        """
        if account is None:
            account = await self.account_context()

        builder = (
            self.new_transaction()
            .set_memo(memo)
            .set_timeout_height(timeout_height)
            .set_fee(fee if fee is not None else self.default_fee())
            .set_account(account)
        )
        for message in messages:
            builder.add_any(message)

        return builder.sign(self._wallet)

    async def send(
        self,
        messages: Iterable[Message],
        fee: Optional[Fee] = None,
        memo: str = "",
        timeout_height: int = 0,
        mode: Union[BroadcastMode, int] = BroadcastMode.SYNC,
    ) -> BroadcastResult:
        """
        Sign a transaction and broadcast it.

        The provider's result is returned as is; a non-zero ``code`` is the
        caller's to interpret.

        Raises:
            ProviderError: If account lookup or broadcast fails
            EncodingFailed: If a value cannot be encoded
            SignatureFailed: If signing fails
        """
        tx = await self.sign(messages, fee=fee, memo=memo, timeout_height=timeout_height)
        self._logger.info(f"Broadcasting transaction {tx.tx_hash} ({BroadcastMode(mode).name})")

        try:
            return await self._provider.broadcast(tx.to_bytes(), BroadcastMode(mode))
        except ProviderError:
            raise
        except Exception as e:
            self._logger.error(f"Broadcast failed: {e}")
            raise ProviderError(f"Broadcast failed: {e}") from e

    def __repr__(self) -> str:
        return f"Signer(chain_id={self._config.chain_id}, address={self.address})"
