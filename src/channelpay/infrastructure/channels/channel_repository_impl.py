"""Channel repository implementation over a storage abstraction."""

from __future__ import annotations

from typing import Optional

from ...domain.channel_repository import ChannelRepository
from ...domain.entities import BalanceProof, Channel
from ..storage import KeyValueStore


def _channel_key(sender_address: str, receiver_address: str) -> str:
    return f"channel:{sender_address.lower()}:{receiver_address.lower()}"


def _proof_key(channel: Channel) -> str:
    return (
        f"channel_proof:{channel.sender_address.lower()}:"
        f"{channel.receiver_address.lower()}:{channel.block}"
    )


class ChannelRepositoryImpl(ChannelRepository):
    """Channel repository using a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    async def get_channel(
        self, sender_address: str, receiver_address: str
    ) -> Optional[Channel]:
        data = await self.store.get(_channel_key(sender_address, receiver_address))
        if not data:
            return None
        return Channel.model_validate_json(data)

    async def save_channel(self, channel: Channel) -> Channel:
        key = _channel_key(channel.sender_address, channel.receiver_address)
        await self.store.set(key, channel.model_dump_json())
        return channel

    async def delete_channel(self, sender_address: str, receiver_address: str) -> None:
        channel = await self.get_channel(sender_address, receiver_address)
        if channel is None:
            return
        await self.store.delete(_proof_key(channel))
        await self.store.delete(_channel_key(sender_address, receiver_address))

    async def get_latest_proof(self, channel: Channel) -> Optional[BalanceProof]:
        data = await self.store.get(_proof_key(channel))
        if not data:
            return None
        return BalanceProof.model_validate_json(data)

    async def save_proof(self, channel: Channel, proof: BalanceProof) -> None:
        await self.store.set(_proof_key(channel), proof.model_dump_json())
