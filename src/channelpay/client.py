"""Client for a pay-per-request API backed by a payment channel."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type
from types import TracebackType

import httpx

from .application.channel_locks import ChannelLockRegistry, default_channel_locks
from .application.dtos import PaidRequestContext, RequestParams
from .application.use_cases.channel_setup import ChannelSetupService
from .application.use_cases.payment import PaymentService
from .domain.entities import BalanceProof, Channel
from .domain.shared import ChannelManagerProtocol
from .envs.client_env import ClientSettings
from .infrastructure.api.channels_client import ChannelsApiClient
from .infrastructure.http.http_client import AsyncHttpClient
from .infrastructure.http.paid_http_client import PaidHttpClient


class PaymentChannelClient:
    """Calls the paid API, paying for POST requests over a payment channel.

    Usage:
        ```python
        async with PaymentChannelClient(settings, channel_manager) as client:
            wallet = await client.create_wallet(authorization="Bearer ...")
        ```
    """

    def __init__(
        self,
        settings: ClientSettings,
        channel_manager: ChannelManagerProtocol,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        locks: Optional[ChannelLockRegistry] = None,
    ) -> None:
        self.settings = settings
        self.channel_manager = channel_manager
        self._http = AsyncHttpClient(
            settings.base_url, timeout=settings.request_timeout, client=http_client
        )
        self.channel_setup = ChannelSetupService(
            settings, channel_manager, ChannelsApiClient(self._http, settings.api_key)
        )
        self.payments = PaymentService(settings, channel_manager, self.channel_setup)
        self._paid_http = PaidHttpClient(
            settings,
            self._http,
            channel_manager,
            self.payments,
            locks or default_channel_locks,
        )

    # =========================================================================
    # Requests
    # =========================================================================

    async def get(self, path: str, params: Optional[RequestParams] = None) -> Any:
        return await self._paid_http.get(path, params or RequestParams())

    async def post(
        self,
        path: str,
        params: Optional[RequestParams] = None,
        context: Optional[PaidRequestContext] = None,
    ) -> Any:
        return await self._paid_http.post(path, params or RequestParams(), context)

    # =========================================================================
    # Channel lifecycle
    # =========================================================================

    async def load_channel(self) -> Channel:
        return await self.channel_setup.load_channel()

    async def setup_channel(self) -> tuple[Channel, BalanceProof]:
        """Make sure a valid channel exists and is synced with the server."""
        return await self.channel_setup.ensure_channel()

    async def close(self) -> None:
        """Request a cooperative close of the sender's channel."""
        await self.load_channel()
        await self.channel_manager.close_channel()

    async def settle(self) -> None:
        """Settle the sender's channel on the ledger."""
        await self.load_channel()
        await self.channel_manager.settle_channel()

    # =========================================================================
    # API endpoints
    # =========================================================================

    async def get_account(self, address: str, authorization: Optional[str] = None) -> Any:
        return await self.get(
            f"v1/accounts/{address}", RequestParams(authorization=authorization)
        )

    async def get_transactions(
        self, address: str, authorization: Optional[str] = None
    ) -> Any:
        return await self.get(
            f"v1/transactions/{address}", RequestParams(authorization=authorization)
        )

    async def get_transaction_count(
        self, address: str, authorization: Optional[str] = None
    ) -> Any:
        return await self.get(
            f"v1/transactions/{address}/count",
            RequestParams(authorization=authorization),
        )

    async def create_wallet(
        self,
        authorization: Optional[str] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        return await self.post(
            "v1/wallets", RequestParams(authorization=authorization, body=body)
        )

    async def internal_transfer(
        self, body: Dict[str, Any], authorization: Optional[str] = None
    ) -> Any:
        return await self.post(
            "v1/internal-transfers",
            RequestParams(authorization=authorization, body=body),
        )

    async def external_transfer(
        self, body: Dict[str, Any], authorization: Optional[str] = None
    ) -> Any:
        return await self.post(
            "v1/external-transfers",
            RequestParams(authorization=authorization, body=body),
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "PaymentChannelClient":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()
