"""Pytest fixtures for use case tests."""

from __future__ import annotations

from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from cryptography.hazmat.primitives.asymmetric import ec

from channelpay.application.channel_locks import ChannelLockRegistry
from channelpay.client import PaymentChannelClient
from channelpay.envs.client_env import ClientSettings
from channelpay.infrastructure.channels.channel_manager_impl import LocalChannelManager
from tests.fixtures import FakePaidApi
from tests.fixtures.constants import API_KEY

PRICES = {
    "/v1/wallets": 10,
    "/v1/internal-transfers": 25,
    "/v1/external-transfers": 40,
}


@pytest.fixture
def paid_api(
    sender_key_pair: tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey],
) -> FakePaidApi:
    """Fake API that verifies balance proofs against the sender's key."""
    _, public_key = sender_key_pair
    return FakePaidApi(API_KEY, dict(PRICES), sender_public_key=public_key)


@pytest_asyncio.fixture
async def client(
    settings: ClientSettings,
    channel_manager: LocalChannelManager,
    paid_api: FakePaidApi,
    locks: ChannelLockRegistry,
) -> AsyncGenerator[PaymentChannelClient, None]:
    """Client wired to the fake API and an in-memory ledger."""
    http_client = httpx.AsyncClient(transport=paid_api.transport())
    async with PaymentChannelClient(
        settings, channel_manager, http_client=http_client, locks=locks
    ) as client:
        yield client
    await http_client.aclose()
