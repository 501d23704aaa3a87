"""Pay-per-request API client backed by payment channels."""

from .application.dtos import PaidRequestContext, RequestParams
from .client import PaymentChannelClient
from .domain.entities import BalanceProof, Channel
from .domain.errors import (
    ChannelNotFoundError,
    ChannelPayError,
    InsufficientFundsError,
    PaymentProtocolError,
    PaymentRequiredError,
    ServerUnreachableError,
)
from .envs.client_env import ClientSettings, get_settings

__all__ = [
    "BalanceProof",
    "Channel",
    "ChannelNotFoundError",
    "ChannelPayError",
    "ClientSettings",
    "InsufficientFundsError",
    "PaidRequestContext",
    "PaymentChannelClient",
    "PaymentProtocolError",
    "PaymentRequiredError",
    "RequestParams",
    "ServerUnreachableError",
    "get_settings",
]
