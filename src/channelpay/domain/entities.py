"""Payment channel domain entities: Channel and BalanceProof."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class Channel(BaseModel):
    """Represents a unidirectional sender→receiver payment channel."""

    sender_address: str
    receiver_address: str
    block: int = Field(..., ge=0)
    deposit: int = Field(..., ge=0)
    balance: int = Field(default=0, ge=0)
    is_closed: bool = False

    @model_validator(mode="after")
    def check_balance_within_deposit(self) -> "Channel":
        if self.balance > self.deposit:
            raise ValueError(
                f"Channel balance {self.balance} exceeds deposit {self.deposit}"
            )
        return self

    @property
    def remaining(self) -> int:
        """Deposit still available for new payments."""
        return self.deposit - self.balance

    def is_addressed_to(self, sender_address: str, receiver_address: str) -> bool:
        return (
            self.sender_address.lower() == sender_address.lower()
            and self.receiver_address.lower() == receiver_address.lower()
        )


class BalanceProof(BaseModel):
    """Sender-signed attestation of a channel's cumulative balance."""

    sender_address: str
    receiver_address: str
    block: int = Field(..., ge=0)
    balance: int = Field(..., ge=0)
    signature: str
