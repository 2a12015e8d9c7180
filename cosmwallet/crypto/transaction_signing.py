"""SIGN_MODE_DIRECT transaction signing for cosmwallet."""

import logging
from typing import TYPE_CHECKING

from ..constants import SECP256K1_PUBKEY_TYPE_URL, SignMode
from ..exceptions import EncodingFailed, KeyDerivationFailed
from ..types.transaction import (
    AccountContext,
    AuthInfo,
    Fee,
    Message,
    ModeInfo,
    SignDoc,
    SignedTransaction,
    SignerInfo,
    TxBody,
)
from ..utils.protobuf import ProtoWriter, get_bytes, parse_fields
from .keys import PublicKey

if TYPE_CHECKING:
    from ..modules.wallet import MnemonicWallet

__all__ = [
    "encode_public_key",
    "decode_public_key",
    "build_auth_info",
    "build_sign_doc",
    "sign_direct",
    "verify_direct",
]

logger = logging.getLogger(__name__)


def encode_public_key(public_key: bytes) -> Message:
    """Wrap a compressed key as a ``/cosmos.crypto.secp256k1.PubKey`` Any."""
    value = ProtoWriter().bytes_field(1, bytes(public_key)).to_bytes()
    return Message(SECP256K1_PUBKEY_TYPE_URL, value)


def decode_public_key(message: Message) -> bytes:
    """
    Extract the compressed key from a secp256k1 ``PubKey`` Any.

    Raises:
        EncodingFailed: If the Any holds another key type
    """
    if message.type_url != SECP256K1_PUBKEY_TYPE_URL:
        raise EncodingFailed(f"Unsupported public key type: {message.type_url}")
    return get_bytes(parse_fields(message.value), 1)


def build_auth_info(public_key: bytes, sequence: int, fee: Fee) -> AuthInfo:
    """Build the single-signer auth info declared by a DIRECT signature."""
    signer_info = SignerInfo(
        public_key=encode_public_key(public_key),
        mode_info=ModeInfo(SignMode.DIRECT),
        sequence=sequence,
    )
    return AuthInfo(signer_infos=[signer_info], fee=fee)


def build_sign_doc(
    body_bytes: bytes,
    auth_info_bytes: bytes,
    chain_id: str,
    account_number: int,
) -> SignDoc:
    return SignDoc(
        body_bytes=body_bytes,
        auth_info_bytes=auth_info_bytes,
        chain_id=chain_id,
        account_number=account_number,
    )


def sign_direct(
    body: TxBody,
    fee: Fee,
    account: AccountContext,
    chain_id: str,
    wallet: "MnemonicWallet",
) -> SignedTransaction:
    """
    Encode and sign a transaction in SIGN_MODE_DIRECT.

    The body and auth info are encoded once; the same bytes go into the sign
    doc and into the returned transaction.

    Args:
        body: Messages, memo and timeout height
        fee: Transaction fee
        account: Signer's account number and sequence
        chain_id: Target chain identifier
        wallet: Signing wallet

    Returns:
        Signed transaction with one signature over the encoded sign doc

    Raises:
        EncodingFailed: If a value cannot be encoded
        SignatureFailed: If the wallet fails to sign
    """
    body_bytes = body.encode()
    auth_info_bytes = build_auth_info(wallet.public_key(), account.sequence, fee).encode()
    sign_doc = build_sign_doc(body_bytes, auth_info_bytes, chain_id, account.account_number)

    signature = wallet.sign(sign_doc.encode())

    logger.debug(
        "Signed %d-byte body for account %d sequence %d",
        len(body_bytes),
        account.account_number,
        account.sequence,
    )
    return SignedTransaction(
        body_bytes=body_bytes,
        auth_info_bytes=auth_info_bytes,
        signatures=[signature],
    )


def verify_direct(tx: SignedTransaction, chain_id: str, account_number: int) -> bool:
    """
    Check every signature of ``tx`` against the public key its signer declared.

    Args:
        tx: Signed transaction
        chain_id: Chain the transaction was signed for
        account_number: Signer's account number

    Returns:
        True if the transaction has one signature per signer and all verify
    """
    signer_infos = tx.auth_info.signer_infos
    if not signer_infos or len(signer_infos) != len(tx.signatures):
        return False

    sign_doc = build_sign_doc(tx.body_bytes, tx.auth_info_bytes, chain_id, account_number).encode()
    for info, signature in zip(signer_infos, tx.signatures):
        if info.public_key is None or info.mode_info.mode is not SignMode.DIRECT:
            return False
        try:
            public_key = PublicKey(decode_public_key(info.public_key))
        except (EncodingFailed, KeyDerivationFailed):
            return False
        if not public_key.verify(signature, sign_doc):
            return False
    return True
