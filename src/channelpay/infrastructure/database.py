"""Redis connection for the shared channel cache."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import redis.asyncio as redis


class DatabaseClient:
    """Lazily connected Redis client.

    Several client processes paying from the same sender can point at one
    Redis instance so they resume from the same channel and proof.
    """

    def __init__(self, cache_url: str):
        self.cache_url = cache_url
        self._redis: Optional[redis.Redis] = None

    def initialize_database(self) -> None:
        # e.g. redis://host:6379/0
        self._redis = redis.from_url(self.cache_url, decode_responses=True)

    @asynccontextmanager
    async def get_connection(self) -> AsyncGenerator[redis.Redis, None]:
        """Yield the pooled connection; it stays open between uses."""
        if self._redis is None:
            self.initialize_database()
        assert self._redis is not None
        yield self._redis

    async def aclose(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
