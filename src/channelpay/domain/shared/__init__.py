"""Shared domain utilities.

This package is domain-accessible and should not depend on application code.
"""

from .channel_manager_protocol import ChannelManagerProtocol
from .ledger_gateway_protocol import LedgerGatewayProtocol

__all__ = ["ChannelManagerProtocol", "LedgerGatewayProtocol"]
