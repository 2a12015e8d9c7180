"""Bank module messages for cosmwallet."""

from dataclasses import dataclass
from typing import List

from ..types.common import Address
from ..types.transaction import Coin, Message
from ..utils.protobuf import ProtoWriter, get_repeated_bytes, get_string, parse_fields
from ..utils.validation import validate_address

__all__ = ["MsgSend"]


@dataclass(frozen=True)
class MsgSend:
    """
    ``cosmos.bank.v1beta1.MsgSend``: move coins from one account to another.

    Both addresses are validated and lowercased on construction.

    Example:
        >>> msg = MsgSend(wallet.address("desmos"), recipient, [Coin("udsm", "1000")])
        >>> builder.add_any(msg.to_any())
    """
    from_address: Address
    to_address: Address
    amount: List[Coin]

    TYPE_URL = "/cosmos.bank.v1beta1.MsgSend"

    def __post_init__(self) -> None:
        object.__setattr__(self, "from_address", validate_address(self.from_address))
        object.__setattr__(self, "to_address", validate_address(self.to_address))
        object.__setattr__(self, "amount", list(self.amount))

    def encode(self) -> bytes:
        return (
            ProtoWriter()
            .string_field(1, self.from_address)
            .string_field(2, self.to_address)
            .repeated_message_field(3, [coin.encode() for coin in self.amount])
            .to_bytes()
        )

    @classmethod
    def decode(cls, data: bytes) -> "MsgSend":
        """
        Decode a ``MsgSend`` from its protobuf encoding.

        Raises:
            EncodingFailed: If the bytes are not a valid message
            AddressEncodingFailed: If an address is malformed
        """
        fields = parse_fields(data)
        return cls(
            from_address=Address(get_string(fields, 1)),
            to_address=Address(get_string(fields, 2)),
            amount=[Coin.decode(raw) for raw in get_repeated_bytes(fields, 3)],
        )

    def to_any(self) -> Message:
        """Wrap the message for :meth:`TxBuilder.add_any`."""
        return Message(self.TYPE_URL, self.encode())
