"""Domain-specific exceptions."""

from __future__ import annotations

from typing import Optional

# Message texts raised by channel-management libraries that do not expose a
# typed "channel not found" condition.
NO_CHANNEL_MESSAGES = (
    "No channel found for this account",
    "No open and valid channels found from 0",
)
INSUFFICIENT_FUNDS_PREFIX = "Insuficient funds:"


class ChannelPayError(Exception):
    """Root exception for channel payment failures."""


class ChannelNotFoundError(ChannelPayError):
    """Raised when no open and valid channel exists for a sender/receiver pair."""


class InsufficientFundsError(ChannelPayError):
    """Raised when the channel deposit cannot cover the quoted price."""

    def __init__(self, remaining: int, price: int) -> None:
        self.remaining = remaining
        self.price = price
        super().__init__(
            f"{INSUFFICIENT_FUNDS_PREFIX} remaining deposit {remaining} "
            f"is smaller than price {price}"
        )


class ServerUnreachableError(ChannelPayError):
    """Raised when the paid API cannot be reached while querying a balance."""


class PaymentProtocolError(ChannelPayError):
    """Raised for an unexpected HTTP status outside the 402 payment path."""

    def __init__(self, status_code: Optional[int], body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}: {body}")


class PaymentRequiredError(ChannelPayError):
    """Raised when the server keeps answering 402 after every payment round."""

    def __init__(self, price: int, rounds: int) -> None:
        self.price = price
        self.rounds = rounds
        super().__init__(
            f"Server still requires payment of {price} after {rounds} paid attempts"
        )


def is_channel_not_found(exc: BaseException) -> bool:
    """Return True for the typed error or one of the legacy message signals."""
    if isinstance(exc, ChannelNotFoundError):
        return True
    message = str(exc)
    return any(message == text or message == f"Error: {text}" for text in NO_CHANNEL_MESSAGES)


def is_insufficient_funds(exc: BaseException) -> bool:
    if isinstance(exc, InsufficientFundsError):
        return True
    message = str(exc)
    return message.startswith(INSUFFICIENT_FUNDS_PREFIX) or message.startswith(
        f"Error: {INSUFFICIENT_FUNDS_PREFIX}"
    )
