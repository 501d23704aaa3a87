"""Use cases for paying a 402 challenge with a balance proof."""

from __future__ import annotations

import logging
from typing import Optional

from ...domain.errors import PaymentProtocolError
from ...domain.shared import ChannelManagerProtocol
from ...envs.client_env import ClientSettings
from ..dtos import PaidRequestContext, PaymentHeadersDTO
from .channel_setup import ChannelSetupService

logger = logging.getLogger(__name__)

PRICE_HEADER = "rdn-price"


def parse_price(value: Optional[str]) -> int:
    """Parse the quoted price of a 402 response."""
    if value is None:
        raise PaymentProtocolError(402, f"Missing {PRICE_HEADER} header")
    price = value.strip()
    if not (price.isascii() and price.isdigit()):
        raise PaymentProtocolError(402, f"Invalid {PRICE_HEADER} header: {value!r}")
    return int(price)


class PaymentService:
    """Turns a quoted price into payment headers for the retry."""

    def __init__(
        self,
        settings: ClientSettings,
        channel_manager: ChannelManagerProtocol,
        channel_setup: ChannelSetupService,
    ) -> None:
        self.settings = settings
        self.channel_manager = channel_manager
        self.channel_setup = channel_setup

    async def pay(
        self,
        price: int,
        context: PaidRequestContext,
        quoted_price: Optional[str] = None,
    ) -> PaidRequestContext:
        """Sign a proof covering ``price`` and return the paid request context.

        The new proof's balance is the server-confirmed balance plus ``price``.
        ``quoted_price`` is the server's rdn-price text, echoed back verbatim as
        ``RDN-Price``.
        Raises whatever ``increment_balance_and_sign`` raises, notably
        ``InsufficientFundsError`` when the deposit cannot cover the price.
        """
        channel, _ = await self.channel_setup.ensure_channel()

        proof = await self.channel_manager.increment_balance_and_sign(price)
        await self.channel_manager.confirm_payment(proof)
        logger.debug(
            "Confirmed balance %s (price %s) on channel at block %s",
            proof.balance,
            price,
            channel.block,
        )

        payment_headers = PaymentHeadersDTO.from_proof(
            self.settings.contract_address,
            channel,
            proof,
            quoted_price if quoted_price is not None else str(price),
        )
        return PaidRequestContext(
            channel=channel,
            proof=proof,
            headers={**context.headers, **payment_headers.as_headers()},
        )
