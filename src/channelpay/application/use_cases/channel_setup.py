"""Use cases for making sure a valid channel backs the next payment."""

from __future__ import annotations

import logging

from ...domain.entities import BalanceProof, Channel
from ...domain.errors import is_channel_not_found
from ...domain.shared import ChannelManagerProtocol
from ...envs.client_env import ClientSettings
from ...infrastructure.api.channels_client import ChannelsApiClient

logger = logging.getLogger(__name__)


class ChannelSetupService:
    """Ensures a channel exists and syncs proof bookkeeping with the server."""

    def __init__(
        self,
        settings: ClientSettings,
        channel_manager: ChannelManagerProtocol,
        channels_api: ChannelsApiClient,
    ) -> None:
        self.settings = settings
        self.channel_manager = channel_manager
        self.channels_api = channels_api

    async def load_channel(self) -> Channel:
        """Load the sender's channel from the local cache, else from the ledger."""
        sender = self.settings.sender_address
        receiver = self.settings.receiver_address
        channel = await self.channel_manager.load_stored_channel(sender, receiver)
        if channel is not None:
            return channel
        return await self.channel_manager.load_channel_from_ledger(sender, receiver)

    async def _open_channel(self) -> Channel:
        logger.info(
            "Opening channel %s -> %s with deposit %s",
            self.settings.sender_address,
            self.settings.receiver_address,
            self.settings.default_deposit,
        )
        return await self.channel_manager.open_channel(
            self.settings.sender_address,
            self.settings.receiver_address,
            self.settings.default_deposit,
        )

    async def _is_usable(self, channel: Channel) -> bool:
        if not channel.is_addressed_to(
            self.settings.sender_address, self.settings.receiver_address
        ):
            return False
        return await self.channel_manager.is_channel_valid(channel)

    async def ensure_channel(self) -> tuple[Channel, BalanceProof]:
        """Return a valid channel and a confirmed proof of the server's balance.

        1) Load the channel (local cache, then ledger)
        2) Keep it if valid and addressed to the configured pair, otherwise
           open a new one with the default deposit
        3) Query the server-recorded balance for the channel
        4) Sign a proof of exactly that balance and confirm it
        """
        try:
            channel = await self.load_channel()
        except Exception as e:
            if not is_channel_not_found(e):
                raise
            logger.debug("No channel found: %s", e)
            channel = await self._open_channel()
        else:
            if not await self._is_usable(channel):
                logger.debug("Loaded channel at block %s is not valid", channel.block)
                channel = await self._open_channel()

        server_balance = await self.channels_api.get_sender_balance(
            self.settings.sender_address, channel.block
        )

        proof = await self.channel_manager.sign_new_proof(server_balance.balance)
        await self.channel_manager.confirm_payment(proof)
        logger.debug(
            "Synced channel at block %s to server balance %s",
            channel.block,
            proof.balance,
        )
        return channel, proof
