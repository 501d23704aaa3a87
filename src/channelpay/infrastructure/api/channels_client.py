from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from ...application.dtos import ChannelBalanceDTO
from ...domain.errors import PaymentProtocolError, ServerUnreachableError
from ..http.http_client import AsyncHttpClient

logger = logging.getLogger(__name__)


class ChannelsApiClient:
    """Reads the paid API's view of a sender's channel balance."""

    def __init__(self, http: AsyncHttpClient, api_key: str) -> None:
        self._http = http
        self._api_key = api_key

    async def get_sender_balance(
        self, sender_address: str, block: int
    ) -> ChannelBalanceDTO:
        """Fetch the balance the server has recorded for ``sender_address``.

        The server is the source of truth for how much has already been paid
        on the channel opened at ``block``.
        """
        path = f"/v1/channels/{sender_address}/{block}"
        try:
            resp = await self._http.get(path, headers={"x-api-key": self._api_key})
        except httpx.HTTPStatusError as e:
            raise PaymentProtocolError(
                e.response.status_code,
                f"{e.response.reason_phrase}: {e.response.text}",
            ) from e
        except httpx.RequestError as e:
            raise ServerUnreachableError(f"Could not reach paid API: {e}") from e

        try:
            balance = ChannelBalanceDTO.model_validate(resp.json())
        except (ValueError, ValidationError) as e:
            raise PaymentProtocolError(
                resp.status_code, f"Invalid channel balance response: {resp.text}"
            ) from e
        logger.debug(
            "Server balance for %s at block %s is %s",
            sender_address,
            block,
            balance.balance,
        )
        return balance
