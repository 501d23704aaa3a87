from __future__ import annotations

import base64
import json

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import BaseModel


class BalanceProofPayload(BaseModel):
    """Fields covered by a balance proof signature."""

    sender_address: str
    receiver_address: str
    block: int
    balance: int


def json_to_bytes(data: dict) -> bytes:
    """Serialize dict to canonical JSON bytes for signing/verification."""
    return json.dumps(data, separators=(",", ":"), sort_keys=True).encode("utf-8")


def load_private_key_from_pem(pem_str: str) -> ec.EllipticCurvePrivateKey:
    """Load a cryptography private key object from a PEM-formatted string."""
    key = serialization.load_pem_private_key(pem_str.encode(), password=None)
    if not isinstance(key, ec.EllipticCurvePrivateKey):
        raise ValueError("Balance proofs require an elliptic curve private key")
    return key


def sign_balance_proof(
    private_key: ec.EllipticCurvePrivateKey, payload: BalanceProofPayload
) -> str:
    """Sign the canonical payload with ECDSA SHA256 and return a base64 DER signature."""
    signature_der = private_key.sign(
        json_to_bytes(payload.model_dump()), ec.ECDSA(hashes.SHA256())
    )
    return base64.b64encode(signature_der).decode("utf-8")


def verify_balance_proof(
    public_key: ec.EllipticCurvePublicKey,
    payload: BalanceProofPayload,
    signature_b64: str,
) -> bool:
    """Verify a balance proof signature. Raises InvalidSignature on failure."""
    signature_bytes = base64.b64decode(signature_b64, validate=True)
    public_key.verify(
        signature_bytes, json_to_bytes(payload.model_dump()), ec.ECDSA(hashes.SHA256())
    )
    return True
