"""Transaction-related type definitions for cosmwallet.

Each message type mirrors its ``cosmos.tx.v1beta1`` protobuf definition and
knows how to encode itself canonically and decode itself back.
"""

import hashlib
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterator, List, Optional, Union

from ..constants import SignMode
from ..exceptions import EncodingFailed, MissingAccountContext, MissingFee
from ..types.common import TxHash
from ..utils.protobuf import (
    ProtoWriter,
    get_bytes,
    get_repeated_bytes,
    get_string,
    get_uint64,
    parse_fields,
)
from ..utils.validation import validate_amount, validate_denom, validate_uint64

if TYPE_CHECKING:
    from ..modules.wallet import MnemonicWallet

__all__ = [
    "Message",
    "Coin",
    "Fee",
    "AccountContext",
    "TxBody",
    "ModeInfo",
    "SignerInfo",
    "AuthInfo",
    "SignDoc",
    "SignedTransaction",
    "BuilderState",
    "TxBuilder",
]


@contextmanager
def _decoding(type_name: str) -> Iterator[None]:
    """Report field values rejected while rebuilding a decoded message as EncodingFailed."""
    try:
        yield
    except EncodingFailed:
        raise
    except (ValueError, TypeError) as e:
        raise EncodingFailed(f"Invalid {type_name}: {e}") from e


@dataclass(frozen=True)
class Message:
    """
    One chain operation as a protobuf ``Any``.

    Attributes:
        type_url: Fully qualified message type, e.g. ``/cosmos.bank.v1beta1.MsgSend``
        value: Protobuf encoding of the message
    """
    type_url: str
    value: bytes = b""

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .string_field(1, self.type_url)
            .bytes_field(2, self.value)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "Message":
        fields = parse_fields(data)
        return cls(type_url=get_string(fields, 1), value=get_bytes(fields, 2))


@dataclass(frozen=True)
class Coin:
    """Token amount; ``amount`` is an arbitrary-precision integer string."""
    denom: str
    amount: str

    def __post_init__(self) -> None:
        validate_denom(self.denom)
        object.__setattr__(self, "amount", validate_amount(self.amount))

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .string_field(1, self.denom)
            .string_field(2, self.amount)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "Coin":
        fields = parse_fields(data)
        with _decoding("Coin"):
            return cls(denom=get_string(fields, 1), amount=get_string(fields, 2) or "0")

    def __str__(self) -> str:
        return f"{self.amount}{self.denom}"


@dataclass(frozen=True)
class Fee:
    """
    Transaction fee.

    Attributes:
        amount: Coins paid as fee
        gas_limit: Maximum gas the transaction may consume
        payer: Optional address paying the fee instead of the first signer
        granter: Optional address whose fee grant covers the fee
    """
    amount: List[Coin]
    gas_limit: int
    payer: str = ""
    granter: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", list(self.amount))
        validate_uint64(self.gas_limit, "gas_limit")

    @classmethod
    def single(
        cls,
        denom: str,
        amount: Union[str, int],
        gas_limit: int,
        payer: str = "",
        granter: str = "",
    ) -> "Fee":
        """Build a fee paid in one denomination."""
        return cls(amount=[Coin(denom, amount)], gas_limit=gas_limit, payer=payer, granter=granter)

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .repeated_message_field(1, [coin.encode() for coin in self.amount])
            .uint64_field(2, self.gas_limit)
            .string_field(3, self.payer)
            .string_field(4, self.granter)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "Fee":
        fields = parse_fields(data)
        return cls(
            amount=[Coin.decode(raw) for raw in get_repeated_bytes(fields, 1)],
            gas_limit=get_uint64(fields, 2),
            payer=get_string(fields, 3),
            granter=get_string(fields, 4),
        )


@dataclass(frozen=True)
class AccountContext:
    """Account number and sequence a chain assigned to the signer."""
    account_number: int
    sequence: int

    def __post_init__(self) -> None:
        validate_uint64(self.account_number, "account_number")
        validate_uint64(self.sequence, "sequence")


@dataclass
class TxBody:
    """Ordered messages plus memo and timeout height."""
    messages: List[Message] = field(default_factory=list)
    memo: str = ""
    timeout_height: int = 0

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .repeated_message_field(1, [message.encode() for message in self.messages])
            .string_field(2, self.memo)
            .uint64_field(3, self.timeout_height)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "TxBody":
        fields = parse_fields(data)
        return cls(
            messages=[Message.decode(raw) for raw in get_repeated_bytes(fields, 1)],
            memo=get_string(fields, 2),
            timeout_height=get_uint64(fields, 3),
        )


@dataclass(frozen=True)
class ModeInfo:
    """Signing mode of a single signer (the ``single`` branch of the oneof)."""
    mode: SignMode = SignMode.DIRECT

    def encode(self) -> bytes:
        single = ProtoWriter().uint64_field(1, int(self.mode)).to_bytes()
        return ProtoWriter().message_field(1, single).to_bytes()

    @classmethod
    def decode(cls, data: bytes) -> "ModeInfo":
        fields = parse_fields(data)
        if 1 not in fields:
            raise EncodingFailed("Only single-signer mode info is supported")
        single = parse_fields(get_bytes(fields, 1))
        with _decoding("ModeInfo"):
            return cls(mode=SignMode(get_uint64(single, 1)))


@dataclass(frozen=True)
class SignerInfo:
    """Public key, signing mode and sequence of one signer."""
    public_key: Optional[Message]
    mode_info: ModeInfo
    sequence: int

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .message_field(1, self.public_key.encode() if self.public_key is not None else None)
            .message_field(2, self.mode_info.encode())
            .uint64_field(3, self.sequence)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "SignerInfo":
        fields = parse_fields(data)
        return cls(
            public_key=Message.decode(get_bytes(fields, 1)) if 1 in fields else None,
            mode_info=ModeInfo.decode(get_bytes(fields, 2)),
            sequence=get_uint64(fields, 3),
        )


@dataclass
class AuthInfo:
    """Signer entries plus the fee."""
    signer_infos: List[SignerInfo] = field(default_factory=list)
    fee: Optional[Fee] = None

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .repeated_message_field(1, [info.encode() for info in self.signer_infos])
            .message_field(2, self.fee.encode() if self.fee is not None else None)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "AuthInfo":
        fields = parse_fields(data)
        return cls(
            signer_infos=[SignerInfo.decode(raw) for raw in get_repeated_bytes(fields, 1)],
            fee=Fee.decode(get_bytes(fields, 2)) if 2 in fields else None,
        )


@dataclass(frozen=True)
class SignDoc:
    """
    The exact payload signed in SIGN_MODE_DIRECT.

    Only these four values influence the signed bytes.
    """
    body_bytes: bytes
    auth_info_bytes: bytes
    chain_id: str
    account_number: int

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .bytes_field(1, self.body_bytes)
            .bytes_field(2, self.auth_info_bytes)
            .string_field(3, self.chain_id)
            .uint64_field(4, self.account_number)
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "SignDoc":
        fields = parse_fields(data)
        return cls(
            body_bytes=get_bytes(fields, 1),
            auth_info_bytes=get_bytes(fields, 2),
            chain_id=get_string(fields, 3),
            account_number=get_uint64(fields, 4),
        )


@dataclass(frozen=True)
class SignedTransaction:
    """
    A signed transaction in its ``TxRaw`` form.

    ``body_bytes`` and ``auth_info_bytes`` are kept exactly as signed; the
    wire encoding is built from them, never from re-encoded logical values.
    """
    body_bytes: bytes
    auth_info_bytes: bytes
    signatures: List[bytes]

    def __post_init__(self) -> None:
        object.__setattr__(self, "signatures", [bytes(sig) for sig in self.signatures])

    @property
    def body(self) -> TxBody:
        return TxBody.decode(self.body_bytes)

    @property
    def auth_info(self) -> AuthInfo:
        return AuthInfo.decode(self.auth_info_bytes)

    def to_bytes(self) -> bytes:
        """Encode as ``TxRaw`` for broadcasting."""
        return (
            ProtoWriter()
            .bytes_field(1, self.body_bytes)
            .bytes_field(2, self.auth_info_bytes)
            .repeated_bytes_field(3, self.signatures)
            .to_bytes()
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "SignedTransaction":
        fields = parse_fields(data)
        return cls(
            body_bytes=get_bytes(fields, 1),
            auth_info_bytes=get_bytes(fields, 2),
            signatures=get_repeated_bytes(fields, 3),
        )

    @property
    def tx_hash(self) -> TxHash:
        """Uppercase hex SHA256 of the wire bytes, as reported by nodes."""
        return TxHash(hashlib.sha256(self.to_bytes()).hexdigest().upper())

    def to_dict(self) -> dict:
        """Readable view for logging and debugging."""
        body = self.body
        auth_info = self.auth_info
        return {
            "body": {
                "messages": [
                    {"type_url": msg.type_url, "value": msg.value.hex()} for msg in body.messages
                ],
                "memo": body.memo,
                "timeout_height": body.timeout_height,
            },
            "auth_info": {
                "signer_infos": [
                    {
                        "public_key": info.public_key.value.hex() if info.public_key else None,
                        "mode": info.mode_info.mode.name,
                        "sequence": info.sequence,
                    }
                    for info in auth_info.signer_infos
                ],
                "fee": {
                    "amount": [str(coin) for coin in auth_info.fee.amount],
                    "gas_limit": auth_info.fee.gas_limit,
                    "payer": auth_info.fee.payer,
                    "granter": auth_info.fee.granter,
                } if auth_info.fee else None,
            },
            "signatures": [sig.hex() for sig in self.signatures],
        }


class BuilderState(Enum):
    """Lifecycle of a :class:`TxBuilder`."""
    EMPTY = "empty"
    CONFIGURED = "configured"
    SIGNED = "signed"
    ERROR = "error"


class TxBuilder:
    """
    Single-signer transaction builder.

    Setters can be called in any order and return the builder, so a
    transaction reads as one chain of calls. Required values are checked only
    by :meth:`sign`, which consumes the builder.

    Example:
        >>> tx = (
        ...     TxBuilder("testchain")
        ...     .set_memo("Test memo")
        ...     .set_account_info(sequence=1, account_number=5)
        ...     .set_fee(Fee.single("stake", "10", 300_000))
        ...     .set_timeout_height(1000)
        ...     .add_message(MsgSend.TYPE_URL, msg.encode())
        ...     .sign(wallet)
        ... )
    """

    def __init__(self, chain_id: str = "") -> None:
        self._chain_id = chain_id
        self._body = TxBody()
        self._fee: Optional[Fee] = None
        self._account: Optional[AccountContext] = None
        self._state = BuilderState.EMPTY
        self._logger = logging.getLogger(f"{__name__}.TxBuilder")

    @property
    def state(self) -> BuilderState:
        return self._state

    @property
    def chain_id(self) -> str:
        return self._chain_id

    @property
    def messages(self) -> List[Message]:
        return list(self._body.messages)

    @property
    def fee(self) -> Optional[Fee]:
        return self._fee

    @property
    def account(self) -> Optional[AccountContext]:
        return self._account

    def _touch(self) -> "TxBuilder":
        if self._state is BuilderState.SIGNED:
            raise RuntimeError("Transaction builder has already been signed")
        self._state = BuilderState.CONFIGURED
        return self

    def set_chain_id(self, chain_id: str) -> "TxBuilder":
        self._touch()
        self._chain_id = chain_id
        return self

    def add_message(self, type_url: str, value: bytes) -> "TxBuilder":
        """Append a message given its type URL and protobuf encoding."""
        return self.add_any(Message(type_url, bytes(value)))

    def add_any(self, message: Message) -> "TxBuilder":
        """Append an already wrapped message."""
        self._touch()
        self._body.messages.append(message)
        return self

    def set_memo(self, memo: str) -> "TxBuilder":
        self._touch()
        self._body.memo = memo
        return self

    def set_timeout_height(self, timeout_height: int) -> "TxBuilder":
        """Set the block height after which the transaction is no longer valid; 0 disables it."""
        self._touch()
        self._body.timeout_height = validate_uint64(timeout_height, "timeout_height")
        return self

    def set_fee(self, fee: Fee) -> "TxBuilder":
        self._touch()
        self._fee = fee
        return self

    def set_account_info(self, sequence: int, account_number: int) -> "TxBuilder":
        """Set the signer's sequence and account number."""
        return self.set_account(AccountContext(account_number=account_number, sequence=sequence))

    def set_account(self, account: AccountContext) -> "TxBuilder":
        self._touch()
        self._account = account
        return self

    def sign(self, wallet: "MnemonicWallet") -> SignedTransaction:
        """
        Sign the transaction in SIGN_MODE_DIRECT.

        Args:
            wallet: Wallet whose current key signs and is declared as signer

        Returns:
            Signed transaction with exactly one signature

        Raises:
            MissingAccountContext: If account info was never set
            MissingFee: If no fee was set
            EncodingFailed: If a value cannot be encoded
            SignatureFailed: If the wallet fails to sign
        """
        from ..crypto.transaction_signing import sign_direct

        if self._state is BuilderState.SIGNED:
            raise RuntimeError("Transaction builder has already been signed")

        try:
            if self._account is None:
                raise MissingAccountContext()
            if self._fee is None:
                raise MissingFee()

            self._logger.debug(
                "Signing transaction on %r with %d message(s)",
                self._chain_id,
                len(self._body.messages),
            )
            signed = sign_direct(self._body, self._fee, self._account, self._chain_id, wallet)
        except Exception:
            self._state = BuilderState.ERROR
            raise

        self._state = BuilderState.SIGNED
        return signed
