"""HTTP client for a pay-per-request API gated by 402 challenges.

Flow of ``post``:
    1. Attempt the request with the current context headers
    2. On 402: pay the quoted price on the channel, then retry with the
       balance proof carried as ``RDN-*`` headers
    3. On funds exhaustion: top up (if enabled) and retry without payment
       headers, so the next 402 round signs against the new deposit
    4. Resolve on success, raise on any other status
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from ...application.channel_locks import ChannelLockRegistry
from ...application.dtos import PaidRequestContext, RequestParams
from ...application.use_cases.payment import PRICE_HEADER, PaymentService, parse_price
from ...domain.errors import (
    PaymentProtocolError,
    PaymentRequiredError,
    is_insufficient_funds,
)
from ...domain.shared import ChannelManagerProtocol
from ...envs.client_env import ClientSettings
from .http_client import AsyncHttpClient

logger = logging.getLogger(__name__)


class PaidHttpClient:
    """Issues API calls and answers 402 challenges with balance proofs."""

    def __init__(
        self,
        settings: ClientSettings,
        http: AsyncHttpClient,
        channel_manager: ChannelManagerProtocol,
        payments: PaymentService,
        locks: ChannelLockRegistry,
    ) -> None:
        self._settings = settings
        self._http = http
        self._channel_manager = channel_manager
        self._payments = payments
        self._locks = locks

    def _headers(
        self, params: RequestParams, extra: Optional[Dict[str, str]] = None
    ) -> Dict[str, str]:
        headers = dict(extra or {})
        headers["Content-Type"] = "application/json"
        if params.authorization is not None:
            headers["Authorization"] = params.authorization
        headers["x-api-key"] = self._settings.api_key
        return headers

    async def get(self, path: str, params: RequestParams) -> Any:
        """GET ``path``; never triggers a payment."""
        resp = await self._http.send("GET", path, headers=self._headers(params))
        if resp.status_code == 200:
            return resp.json()
        raise PaymentProtocolError(resp.status_code, resp.text)

    async def _attempt(
        self, path: str, params: RequestParams, context: PaidRequestContext
    ) -> httpx.Response:
        content = None
        if params.body is not None:
            content = json.dumps(params.body).encode("utf-8")
        logger.debug("POST %s (paid=%s)", path, context.proof is not None)
        return await self._http.send(
            "POST",
            path,
            headers=self._headers(params, context.headers),
            content=content,
        )

    async def post(
        self,
        path: str,
        params: RequestParams,
        context: Optional[PaidRequestContext] = None,
    ) -> Any:
        """POST ``path``, paying for it if the server answers 402.

        Raises:
            InsufficientFundsError: If the channel cannot cover the price and
                auto top-up is disabled
            PaymentRequiredError: If the server still answers 402 after
                ``max_payment_rounds`` paid attempts
            PaymentProtocolError: For any other status >= 300
            httpx.RequestError: On transport failure
        """
        context = context or PaidRequestContext()
        resp = await self._attempt(path, params, context)

        rounds = 0
        while resp.status_code == 402:
            price = parse_price(resp.headers.get(PRICE_HEADER))
            quoted_price = resp.headers[PRICE_HEADER].strip()
            if rounds >= self._settings.max_payment_rounds:
                raise PaymentRequiredError(price, rounds)
            rounds += 1
            logger.debug("Payment of %s required for %s (round %s)", price, path, rounds)

            lock = self._locks.for_channel(
                self._settings.sender_address, self._settings.receiver_address
            )
            async with lock:
                try:
                    context = await self._payments.pay(price, context, quoted_price)
                except Exception as e:
                    if not is_insufficient_funds(e) or not self._settings.auto_topup_enabled:
                        raise
                    amount = self._settings.auto_topup_amount
                    assert amount is not None
                    logger.info("Channel exhausted (%s), topping up %s", e, amount)
                    await self._channel_manager.top_up_channel(amount)
                    context = PaidRequestContext()
                resp = await self._attempt(path, params, context)

        if resp.status_code >= 300:
            raise PaymentProtocolError(resp.status_code, resp.text)
        if not resp.content:
            return None
        return resp.json()
