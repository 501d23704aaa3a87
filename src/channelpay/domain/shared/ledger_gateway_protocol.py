"""Protocol interface for the on-ledger side of a payment channel."""

from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities import BalanceProof, Channel


class LedgerGatewayProtocol(Protocol):
    """Contract calls used by ``LocalChannelManager``.

    Each call returns once the ledger has accepted the operation.
    """

    async def find_open_channel(
        self, sender_address: str, receiver_address: str
    ) -> Optional["Channel"]:
        ...

    async def open_channel(
        self, sender_address: str, receiver_address: str, deposit: int
    ) -> "Channel":
        ...

    async def top_up(self, channel: "Channel", amount: int) -> "Channel":
        ...

    async def close(self, channel: "Channel", proof: Optional["BalanceProof"]) -> None:
        ...

    async def settle(self, channel: "Channel") -> None:
        ...
