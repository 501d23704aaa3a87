"""Test fixtures and in-memory implementations."""

from .in_memory_ledger import InMemoryLedgerGateway
from .paid_api import FakePaidApi

__all__ = ["FakePaidApi", "InMemoryLedgerGateway"]
