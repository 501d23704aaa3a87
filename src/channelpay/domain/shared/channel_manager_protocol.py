"""Protocol interface for channel manager implementations.

The channel manager owns a sender's channel state: it discovers channels
locally or on the ledger, opens and tops them up, and signs and confirms
balance proofs. The payment client only talks to it through this contract,
so any implementation (the bundled ``LocalChannelManager`` or a wrapper around
a third-party library) can be injected.
"""

from __future__ import annotations

from typing import Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ..entities import BalanceProof, Channel


class ChannelManagerProtocol(Protocol):
    """Protocol defining the interface for channel manager implementations.

    Implementations must serialize confirmation per channel: two proofs for the
    same channel are never confirmed out of order.
    """

    # Discovery

    async def load_stored_channel(
        self, sender_address: str, receiver_address: str
    ) -> Optional["Channel"]:
        """Load the channel for the pair from local state.

        Returns:
            The cached channel, or None when nothing is stored locally
        """
        ...

    async def load_channel_from_ledger(
        self, sender_address: str, receiver_address: str
    ) -> "Channel":
        """Find the pair's open channel on the ledger and make it current.

        Raises:
            ChannelNotFoundError: If no open channel exists for the pair
        """
        ...

    async def is_channel_valid(self, channel: "Channel") -> bool:
        """Return True if the channel is open, correctly addressed and funded."""
        ...

    # Ledger operations

    async def open_channel(
        self, sender_address: str, receiver_address: str, deposit: int
    ) -> "Channel":
        """Open a new channel with the given deposit and make it current."""
        ...

    async def top_up_channel(self, amount: int) -> "Channel":
        """Add ``amount`` to the current channel's deposit."""
        ...

    async def close_channel(self) -> None:
        """Request a cooperative close of the current channel."""
        ...

    async def settle_channel(self) -> None:
        """Settle the current channel after its challenge period."""
        ...

    # Balance proofs

    async def sign_new_proof(self, balance: int) -> "BalanceProof":
        """Sign a proof for exactly ``balance`` on the current channel."""
        ...

    async def increment_balance_and_sign(self, amount: int) -> "BalanceProof":
        """Sign a proof for the committed balance plus ``amount``.

        Raises:
            InsufficientFundsError: If the remaining deposit is below ``amount``
        """
        ...

    async def confirm_payment(self, proof: "BalanceProof") -> None:
        """Register ``proof`` as the current channel's committed balance."""
        ...
