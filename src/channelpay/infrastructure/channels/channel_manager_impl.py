"""Channel manager backed by a local channel cache and a ledger gateway."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from cryptography.hazmat.primitives.asymmetric import ec

from ...crypto.balance_proofs import (
    BalanceProofPayload,
    sign_balance_proof,
    verify_balance_proof,
)
from ...domain.channel_repository import ChannelRepository
from ...domain.entities import BalanceProof, Channel
from ...domain.errors import ChannelNotFoundError, InsufficientFundsError
from ...domain.shared import LedgerGatewayProtocol

logger = logging.getLogger(__name__)


class LocalChannelManager:
    """Implements ``ChannelManagerProtocol`` for a single sender.

    The current channel and its committed proof are cached through the
    repository so a restarted client resumes without a ledger lookup.
    """

    def __init__(
        self,
        sender_address: str,
        private_key: ec.EllipticCurvePrivateKey,
        repository: ChannelRepository,
        ledger: LedgerGatewayProtocol,
    ) -> None:
        self.sender_address = sender_address
        self._private_key = private_key
        self._repository = repository
        self._ledger = ledger
        self._channel: Optional[Channel] = None
        self._confirm_lock = asyncio.Lock()

    @property
    def channel(self) -> Optional[Channel]:
        return self._channel

    def _require_channel(self) -> Channel:
        if self._channel is None:
            raise ChannelNotFoundError("No channel found for this account")
        return self._channel

    async def _make_current(self, channel: Channel) -> Channel:
        self._channel = await self._repository.save_channel(channel)
        return self._channel

    async def load_stored_channel(
        self, sender_address: str, receiver_address: str
    ) -> Optional[Channel]:
        channel = await self._repository.get_channel(sender_address, receiver_address)
        if channel is not None:
            self._channel = channel
        return channel

    async def load_channel_from_ledger(
        self, sender_address: str, receiver_address: str
    ) -> Channel:
        channel = await self._ledger.find_open_channel(sender_address, receiver_address)
        if channel is None:
            raise ChannelNotFoundError("No open and valid channels found from 0")
        return await self._make_current(channel)

    async def is_channel_valid(self, channel: Channel) -> bool:
        if channel.is_closed:
            return False
        if channel.sender_address.lower() != self.sender_address.lower():
            return False
        return channel.deposit > 0 and channel.remaining > 0

    async def open_channel(
        self, sender_address: str, receiver_address: str, deposit: int
    ) -> Channel:
        if sender_address.lower() != self.sender_address.lower():
            raise ValueError(f"Cannot open a channel for foreign sender {sender_address}")
        if deposit <= 0:
            raise ValueError("Deposit must be greater than zero")
        channel = await self._ledger.open_channel(sender_address, receiver_address, deposit)
        logger.info(
            "Opened channel %s -> %s at block %s", sender_address, receiver_address, channel.block
        )
        return await self._make_current(channel)

    async def top_up_channel(self, amount: int) -> Channel:
        if amount <= 0:
            raise ValueError("Top-up amount must be greater than zero")
        channel = self._require_channel()
        topped_up = await self._ledger.top_up(channel, amount)
        # The ledger does not know the off-chain balance.
        return await self._make_current(
            topped_up.model_copy(update={"balance": channel.balance})
        )

    async def close_channel(self) -> None:
        channel = self._require_channel()
        proof = await self._repository.get_latest_proof(channel)
        await self._ledger.close(channel, proof)
        await self._make_current(channel.model_copy(update={"is_closed": True}))

    async def settle_channel(self) -> None:
        channel = self._require_channel()
        await self._ledger.settle(channel)
        await self._repository.delete_channel(
            channel.sender_address, channel.receiver_address
        )
        self._channel = None

    def _sign(self, channel: Channel, balance: int) -> BalanceProof:
        payload = BalanceProofPayload(
            sender_address=channel.sender_address,
            receiver_address=channel.receiver_address,
            block=channel.block,
            balance=balance,
        )
        return BalanceProof(
            **payload.model_dump(),
            signature=sign_balance_proof(self._private_key, payload),
        )

    async def sign_new_proof(self, balance: int) -> BalanceProof:
        channel = self._require_channel()
        if balance < 0:
            raise ValueError("Balance cannot be negative")
        if balance > channel.deposit:
            raise InsufficientFundsError(channel.deposit, balance)
        return self._sign(channel, balance)

    async def increment_balance_and_sign(self, amount: int) -> BalanceProof:
        channel = self._require_channel()
        if amount < 0:
            raise ValueError("Price cannot be negative")
        if amount > channel.remaining:
            raise InsufficientFundsError(channel.remaining, amount)
        return self._sign(channel, channel.balance + amount)

    async def confirm_payment(self, proof: BalanceProof) -> None:
        async with self._confirm_lock:
            channel = self._require_channel()
            if (
                proof.block != channel.block
                or not channel.is_addressed_to(proof.sender_address, proof.receiver_address)
            ):
                raise ValueError("Balance proof does not belong to the current channel")
            if proof.balance > channel.deposit:
                raise InsufficientFundsError(channel.remaining, proof.balance - channel.balance)
            payload = BalanceProofPayload(
                sender_address=proof.sender_address,
                receiver_address=proof.receiver_address,
                block=proof.block,
                balance=proof.balance,
            )
            verify_balance_proof(self._private_key.public_key(), payload, proof.signature)
            if proof.balance < channel.balance:
                logger.warning(
                    "Committed balance on block %s moves back from %s to %s",
                    channel.block,
                    channel.balance,
                    proof.balance,
                )
            await self._repository.save_proof(channel, proof)
            await self._make_current(channel.model_copy(update={"balance": proof.balance}))
