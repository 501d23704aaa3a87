"""Unit tests for client configuration validation."""

from __future__ import annotations

from typing import Any, Callable

import pytest
from pydantic import ValidationError

from channelpay.envs.client_env import ClientSettings, get_settings


class TestClientSettings:
    """Configuration errors are fatal at construction."""

    def test_valid_settings(self, make_settings: Callable[..., ClientSettings]) -> None:
        settings = make_settings(network="MainNet", base_url="https://api.example.com/")
        assert settings.network == "mainnet"
        assert settings.base_url == "https://api.example.com"
        assert settings.auto_topup_enabled is False
        assert settings.max_payment_rounds == 3

    def test_settings_are_immutable(
        self, make_settings: Callable[..., ClientSettings]
    ) -> None:
        settings = make_settings()
        with pytest.raises(ValidationError):
            settings.api_key = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "overrides, message",
        [
            ({"network": "kovan"}, "network must be one of"),
            ({"api_key": ""}, "API key cannot be empty"),
            ({"base_url": "ftp://api.example.com"}, "must start with http"),
            ({"base_url": "http://"}, "must include a host"),
            ({"sender_address": "0x1234"}, "not a valid address"),
            ({"receiver_address": "not-an-address"}, "not a valid address"),
            ({"default_deposit": 0}, "greater than zero"),
            ({"max_payment_rounds": 0}, "at least 1"),
            ({"auto_topup_enabled": True}, "auto_topup_amount must be provided"),
            ({"auto_topup_amount": -5}, "greater than zero"),
            ({"cache_url": "http://localhost:6379"}, "Cache URL must be"),
        ],
    )
    def test_invalid_settings_raise(
        self,
        make_settings: Callable[..., ClientSettings],
        overrides: dict[str, Any],
        message: str,
    ) -> None:
        with pytest.raises(ValidationError, match=message):
            make_settings(**overrides)

    def test_auto_topup_with_amount(
        self, make_settings: Callable[..., ClientSettings]
    ) -> None:
        settings = make_settings(auto_topup_enabled=True, auto_topup_amount=1000)
        assert settings.auto_topup_amount == 1000


class TestGetSettings:
    """Settings sourced from environment variables."""

    def test_get_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CHANNELPAY_NETWORK", "ropsten")
        monkeypatch.setenv("CHANNELPAY_API_KEY", "key")
        monkeypatch.setenv("CHANNELPAY_BASE_URL", "https://api.example.com")
        monkeypatch.setenv(
            "CHANNELPAY_SENDER_ADDRESS", "0x1111111111111111111111111111111111111111"
        )
        monkeypatch.setenv(
            "CHANNELPAY_RECEIVER_ADDRESS", "0x2222222222222222222222222222222222222222"
        )
        monkeypatch.setenv(
            "CHANNELPAY_CONTRACT_ADDRESS", "0x3333333333333333333333333333333333333333"
        )
        monkeypatch.setenv("CHANNELPAY_DEFAULT_DEPOSIT", "500")
        monkeypatch.setenv("CHANNELPAY_AUTO_TOPUP_ENABLED", "true")
        monkeypatch.setenv("CHANNELPAY_AUTO_TOPUP_AMOUNT", "250")
        monkeypatch.setenv("CHANNELPAY_CACHE_URL", "redis://localhost:6379/2")

        settings = get_settings()

        assert settings.network == "ropsten"
        assert settings.default_deposit == 500
        assert settings.auto_topup_enabled is True
        assert settings.auto_topup_amount == 250
        assert settings.cache_url == "redis://localhost:6379/2"

    def test_get_settings_missing_env_raises(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        for name in (
            "NETWORK",
            "API_KEY",
            "BASE_URL",
            "SENDER_ADDRESS",
            "RECEIVER_ADDRESS",
            "CONTRACT_ADDRESS",
            "DEFAULT_DEPOSIT",
        ):
            monkeypatch.delenv(f"CHANNELPAY_{name}", raising=False)
        with pytest.raises(ValueError, match="CHANNELPAY_NETWORK"):
            get_settings()
