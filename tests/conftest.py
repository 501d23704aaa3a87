"""Shared pytest fixtures for channel payment tests."""

from __future__ import annotations

import os
from typing import Any, AsyncGenerator, Callable

import pytest
import pytest_asyncio
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from channelpay.application.channel_locks import ChannelLockRegistry
from channelpay.envs.client_env import ClientSettings
from channelpay.infrastructure.channels.channel_manager_impl import LocalChannelManager
from channelpay.infrastructure.channels.channel_repository_impl import (
    ChannelRepositoryImpl,
)
from channelpay.infrastructure.database import DatabaseClient
from channelpay.infrastructure.storage import InMemoryKeyValueStore, RedisKeyValueStore
from tests.fixtures import InMemoryLedgerGateway
from tests.fixtures.constants import API_KEY, BASE_URL, CONTRACT, RECEIVER, SENDER


@pytest.fixture
def sender_key_pair() -> tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey]:
    """Generate a sender key pair for testing."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()


@pytest.fixture
def sender_private_key_pem(
    sender_key_pair: tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey],
) -> str:
    """Get sender private key as PEM string."""
    private_key, _ = sender_key_pair
    pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    return pem.decode("utf-8")


@pytest.fixture
def make_settings() -> Callable[..., ClientSettings]:
    """Build client settings, overriding any field by keyword."""

    def _make(**overrides: Any) -> ClientSettings:
        values: dict[str, Any] = {
            "network": "sandbox",
            "api_key": API_KEY,
            "base_url": BASE_URL,
            "sender_address": SENDER,
            "receiver_address": RECEIVER,
            "contract_address": CONTRACT,
            "default_deposit": 1000,
        }
        values.update(overrides)
        return ClientSettings(**values)

    return _make


@pytest.fixture
def settings(make_settings: Callable[..., ClientSettings]) -> ClientSettings:
    return make_settings()


@pytest.fixture
def locks() -> ChannelLockRegistry:
    """Fresh lock registry so tests never share locks across event loops."""
    return ChannelLockRegistry()


@pytest.fixture
def ledger() -> InMemoryLedgerGateway:
    return InMemoryLedgerGateway()


@pytest.fixture
def channel_repository() -> ChannelRepositoryImpl:
    return ChannelRepositoryImpl(InMemoryKeyValueStore())


@pytest.fixture
def channel_manager(
    sender_key_pair: tuple[ec.EllipticCurvePrivateKey, ec.EllipticCurvePublicKey],
    channel_repository: ChannelRepositoryImpl,
    ledger: InMemoryLedgerGateway,
) -> LocalChannelManager:
    private_key, _ = sender_key_pair
    return LocalChannelManager(SENDER, private_key, channel_repository, ledger)


@pytest_asyncio.fixture
async def redis_store() -> AsyncGenerator[RedisKeyValueStore, None]:
    """Create a Redis-backed key-value store for testing.

    Uses database 15 by default, or TEST_REDIS_URL if set. Tests using it are
    skipped when Redis is not reachable.
    """
    test_redis_url = os.getenv("TEST_REDIS_URL", "redis://localhost:6379/15")
    client = DatabaseClient(test_redis_url)
    client.initialize_database()

    try:
        async with client.get_connection() as conn:
            await conn.ping()
    except Exception as e:
        await client.aclose()
        pytest.skip(f"Redis not available: {e}")

    yield RedisKeyValueStore(client)

    async with client.get_connection() as conn:
        await conn.flushdb()
    await client.aclose()
