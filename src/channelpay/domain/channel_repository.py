"""Channel domain repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from .entities import BalanceProof, Channel


class ChannelRepository(ABC):
    """Local cache of the current channel and its committed proof."""

    @abstractmethod
    async def get_channel(
        self, sender_address: str, receiver_address: str
    ) -> Optional[Channel]:
        pass

    @abstractmethod
    async def save_channel(self, channel: Channel) -> Channel:
        pass

    @abstractmethod
    async def delete_channel(self, sender_address: str, receiver_address: str) -> None:
        """Forget the pair's channel and every proof stored for it."""
        pass

    @abstractmethod
    async def get_latest_proof(self, channel: Channel) -> Optional[BalanceProof]:
        pass

    @abstractmethod
    async def save_proof(self, channel: Channel, proof: BalanceProof) -> None:
        pass
