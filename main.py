"""
cosmwallet Usage Examples

This file demonstrates key features of the cosmwallet library. Everything
runs offline: the provider below answers from memory instead of a node.
"""

import asyncio
import logging

from cosmwallet import (
    BaseProvider,
    BroadcastMode,
    Chain,
    Coin,
    Fee,
    MnemonicWallet,
    MsgSend,
    TxBuilder,
    connect,
)
from cosmwallet.crypto.bip39 import generate_mnemonic
from cosmwallet.crypto.transaction_signing import verify_direct
from cosmwallet.types import AccountInfo, BroadcastResult, TxHash
from cosmwallet.types.transaction import SignedTransaction

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

CHAIN_ID = "morpheus-apollo-2"


class InMemoryProvider(BaseProvider):
    """Provider that keeps account sequences in a dict."""

    def __init__(self) -> None:
        super().__init__()
        self.sequences = {}

    async def fetch_account(self, address: str) -> AccountInfo:
        return AccountInfo(address=address, account_number=42, sequence=self.sequences.get(address, 0))

    async def broadcast(self, tx_bytes: bytes, mode: BroadcastMode) -> BroadcastResult:
        tx = SignedTransaction.from_bytes(tx_bytes)
        print(f"Node received {len(tx_bytes)} bytes with {len(tx.body.messages)} message(s)")
        return BroadcastResult(code=0, raw_log="", tx_hash=TxHash(tx.tx_hash))


def wallet_example() -> None:
    """Example 1: Create a wallet and derive addresses."""
    print("\n=== Wallet Example ===")

    phrase = generate_mnemonic()
    with MnemonicWallet(phrase, Chain.COSMOS.derivation_path) as wallet:
        print(f"Cosmos address: {wallet.address('cosmos')}")
        print(f"Public key: {wallet.public_key_hex()}")

        wallet.set_derivation_path(Chain.DESMOS.derivation_path)
        print(f"Desmos address: {wallet.address('desmos')}")

        signature = wallet.sign(b"some simple data")
        print(f"Signature: {signature.hex()}")
        print(f"Verified: {wallet.verify(b'some simple data', signature)}")


def builder_example() -> None:
    """Example 2: Build and sign a transaction by hand."""
    print("\n=== Transaction Builder Example ===")

    sender = MnemonicWallet(generate_mnemonic(), Chain.DESMOS.derivation_path)
    recipient = MnemonicWallet(generate_mnemonic(), Chain.DESMOS.derivation_path)

    msg = MsgSend(sender.address("desmos"), recipient.address("desmos"), [Coin("udsm", "1000")])
    tx = (
        TxBuilder(CHAIN_ID)
        .set_memo("Test memo")
        .set_account_info(sequence=1, account_number=5)
        .set_fee(Fee.single("udsm", "10", 300_000))
        .set_timeout_height(1000)
        .add_any(msg.to_any())
        .sign(sender)
    )

    print(f"Tx hash: {tx.tx_hash}")
    print(f"Wire size: {len(tx.to_bytes())} bytes")
    print(f"Signature valid: {verify_direct(tx, CHAIN_ID, 5)}")

    sender.close()
    recipient.close()


async def signer_example() -> None:
    """Example 3: Sign and broadcast through a provider."""
    print("\n=== Signer Example ===")

    async with InMemoryProvider() as provider:
        signer = connect(provider, generate_mnemonic(), CHAIN_ID, Chain.DESMOS, fee_amount="10")
        msg = MsgSend(signer.address, signer.address, [Coin("udsm", "1")])

        result = await signer.send([msg.to_any()], memo="self transfer")
        print(f"Broadcast code: {result.code}, hash: {result.tx_hash}")

        signer.wallet.close()


def main() -> None:
    wallet_example()
    builder_example()
    asyncio.run(signer_example())


if __name__ == "__main__":
    main()
