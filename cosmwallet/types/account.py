"""Account and broadcast result types exchanged with providers."""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..types.common import Address, TxHash

__all__ = ["AccountInfo", "BroadcastResult"]


@dataclass(frozen=True)
class AccountInfo:
    """Account metadata as reported by a node for one address."""
    address: Address
    account_number: int
    sequence: int


@dataclass(frozen=True)
class BroadcastResult:
    """
    Outcome of a broadcast, passed through from the provider untouched.

    ``code`` is the ABCI result code, zero on success.
    """
    code: int
    raw_log: str
    tx_hash: TxHash
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.code == 0
