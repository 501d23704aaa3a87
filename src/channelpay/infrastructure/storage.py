"""Key-value stores backing the channel cache."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..envs.client_env import ClientSettings
from .database import DatabaseClient


class KeyValueStore(ABC):
    """String key-value store with the operations the channel cache needs."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    async def delete(self, key: str) -> int:
        pass


class RedisKeyValueStore(KeyValueStore):
    def __init__(self, db_client: DatabaseClient):
        self._db_client = db_client

    async def get(self, key: str) -> Optional[str]:
        async with self._db_client.get_connection() as conn:
            return await conn.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._db_client.get_connection() as conn:
            await conn.set(key, value)

    async def delete(self, key: str) -> int:
        async with self._db_client.get_connection() as conn:
            return await conn.delete(key)


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; the cache is lost when the process exits."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> int:
        return 1 if self._data.pop(key, None) is not None else 0


def build_channel_store(settings: ClientSettings) -> KeyValueStore:
    """Redis when ``cache_url`` is configured, otherwise in-process memory."""
    if settings.cache_url is None:
        return InMemoryKeyValueStore()
    return RedisKeyValueStore(DatabaseClient(settings.cache_url))
