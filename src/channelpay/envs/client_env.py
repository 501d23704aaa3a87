from __future__ import annotations

import os
from typing import Optional
from urllib.parse import urlparse

from eth_utils import is_hex_address
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

SUPPORTED_NETWORKS = ("sandbox", "ropsten", "mainnet")


class ClientSettings(BaseModel):
    """Immutable configuration of a payment channel client."""

    model_config = ConfigDict(frozen=True)

    network: str
    api_key: str
    base_url: str
    sender_address: str
    receiver_address: str
    contract_address: str
    default_deposit: int
    auto_topup_enabled: bool = False
    auto_topup_amount: Optional[int] = None
    max_payment_rounds: int = 3
    request_timeout: float = 30.0
    cache_url: Optional[str] = None

    @field_validator("network")
    @classmethod
    def validate_network(cls, v: str) -> str:
        network = v.lower()
        if network not in SUPPORTED_NETWORKS:
            raise ValueError("network must be one of sandbox | ropsten | mainnet")
        return network

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        if not v:
            raise ValueError("API key cannot be empty")
        return v

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v:
            raise ValueError("Base URL cannot be empty")
        parsed = urlparse(v)
        if parsed.scheme not in {"http", "https"}:
            raise ValueError("Base URL must start with http:// or https://")
        if not parsed.netloc:
            raise ValueError("Base URL must include a host")
        return v.rstrip("/")

    @field_validator("sender_address", "receiver_address", "contract_address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        if not is_hex_address(v):
            raise ValueError(f"{v!r} is not a valid address")
        return v

    @field_validator("cache_url")
    @classmethod
    def validate_cache_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if urlparse(v).scheme not in {"redis", "rediss", "unix"}:
            raise ValueError("Cache URL must be a redis://, rediss:// or unix:// URL")
        return v

    @field_validator("default_deposit")
    @classmethod
    def validate_default_deposit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("Default deposit must be greater than zero")
        return v

    @field_validator("max_payment_rounds")
    @classmethod
    def validate_max_payment_rounds(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_payment_rounds must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_auto_topup(self) -> "ClientSettings":
        if self.auto_topup_enabled and not self.auto_topup_amount:
            raise ValueError(
                "If auto_topup_enabled is true, then auto_topup_amount must be provided"
            )
        if self.auto_topup_amount is not None and self.auto_topup_amount <= 0:
            raise ValueError("Auto top-up amount must be greater than zero")
        return self


def get_settings() -> ClientSettings:
    """Return typed client settings sourced from CHANNELPAY_* env vars."""
    required = {
        "network": os.environ.get("CHANNELPAY_NETWORK"),
        "api_key": os.environ.get("CHANNELPAY_API_KEY"),
        "base_url": os.environ.get("CHANNELPAY_BASE_URL"),
        "sender_address": os.environ.get("CHANNELPAY_SENDER_ADDRESS"),
        "receiver_address": os.environ.get("CHANNELPAY_RECEIVER_ADDRESS"),
        "contract_address": os.environ.get("CHANNELPAY_CONTRACT_ADDRESS"),
        "default_deposit": os.environ.get("CHANNELPAY_DEFAULT_DEPOSIT"),
    }
    missing = [name for name, value in required.items() if not value]
    if missing:
        env_names = ", ".join(f"CHANNELPAY_{name.upper()}" for name in missing)
        raise ValueError(f"{env_names} are required")

    auto_topup_amount = os.environ.get("CHANNELPAY_AUTO_TOPUP_AMOUNT")
    return ClientSettings(
        **required,
        auto_topup_enabled=os.environ.get("CHANNELPAY_AUTO_TOPUP_ENABLED", "false").lower()
        == "true",
        auto_topup_amount=int(auto_topup_amount) if auto_topup_amount else None,
        max_payment_rounds=int(os.environ.get("CHANNELPAY_MAX_PAYMENT_ROUNDS", "3")),
        request_timeout=float(os.environ.get("CHANNELPAY_REQUEST_TIMEOUT", "30")),
        cache_url=os.environ.get("CHANNELPAY_CACHE_URL") or None,
    )
