"""Data Transfer Objects for the paid API client."""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.entities import BalanceProof, Channel


class RequestParams(BaseModel):
    """Caller-supplied parameters of a single API call."""

    authorization: Optional[str] = None
    body: Optional[Dict[str, Any]] = None


class PaidRequestContext(BaseModel):
    """Per-call state threaded through the 402 retry chain. Never persisted."""

    channel: Optional[Channel] = None
    proof: Optional[BalanceProof] = None
    headers: Dict[str, str] = Field(default_factory=dict)


class PaymentHeadersDTO(BaseModel):
    """Headers that carry a balance proof on a paid retry."""

    model_config = ConfigDict(populate_by_name=True)

    contract_address: str = Field(..., alias="RDN-Contract-Address")
    receiver_address: str = Field(..., alias="RDN-Receiver-Address")
    sender_address: str = Field(..., alias="RDN-Sender-Address")
    balance_signature: str = Field(..., alias="RDN-Balance-Signature")
    open_block: str = Field(..., alias="RDN-Open-Block")
    balance: str = Field(..., alias="RDN-Balance")
    sender_balance: str = Field(..., alias="RDN-Sender-Balance")
    price: str = Field(..., alias="RDN-Price")

    @classmethod
    def from_proof(
        cls,
        contract_address: str,
        channel: Channel,
        proof: BalanceProof,
        price: str,
    ) -> "PaymentHeadersDTO":
        return cls(
            contract_address=contract_address,
            receiver_address=channel.receiver_address,
            sender_address=channel.sender_address,
            balance_signature=proof.signature,
            open_block=str(channel.block),
            balance=str(proof.balance),
            sender_balance=str(proof.balance),
            price=price,
        )

    def as_headers(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


class ChannelBalanceDTO(BaseModel):
    """Server-recorded balance of a sender on one channel."""

    balance: int

    @field_validator("balance", mode="before")
    @classmethod
    def parse_numeric_string(cls, v: Any) -> int:
        if isinstance(v, bool):
            raise ValueError("balance must be numeric")
        if isinstance(v, str):
            v = v.strip()
            if not v.isdigit():
                raise ValueError(f"balance must be a non-negative integer, got {v!r}")
            return int(v)
        if isinstance(v, int) and v >= 0:
            return v
        raise ValueError(f"balance must be a non-negative integer, got {v!r}")
