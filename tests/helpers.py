"""Helpers shared by unit and integration tests."""

from collections.abc import Callable

import httpx
from cryptography.hazmat.primitives.asymmetric import ec

from jwtseal.crypto import base64url
from jwtseal.crypto.types import KeyRecord
from jwtseal.tokens.codec import encode_segment

# fixed P-256 private scalar; the public point is derived from it
KNOWN_EC_D = "jpsQnnGQmL-YBIffH1136cLSG3brpo7eDJWA4uRmjLs"
_KNOWN_EC_POINT = (
    ec.derive_private_key(base64url.b64_to_int(KNOWN_EC_D), ec.SECP256R1())
    .public_key()
    .public_numbers()
)
KNOWN_EC_JWK = {
    "kty": "EC",
    "crv": "P-256",
    "x": base64url.encode(_KNOWN_EC_POINT.x.to_bytes(32, "big")),
    "y": base64url.encode(_KNOWN_EC_POINT.y.to_bytes(32, "big")),
    "d": KNOWN_EC_D,
}

NOW = 1_700_000_000

JWKSHandler = Callable[[httpx.Request], httpx.Response]


def public_only(record: KeyRecord) -> KeyRecord:
    """Copy of a key record without its private key."""
    return KeyRecord(alg=record.alg, kid=record.kid, public_key=record.public_key)


def mock_client(handler: JWKSHandler) -> httpx.AsyncClient:
    """httpx client whose requests are answered by ``handler``."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def unsigned_token(claims: dict, header: dict | None = None) -> str:
    """Token with an empty signature, for parse-only callers."""
    header = header if header is not None else {"kid": "k", "alg": "ES256"}
    return f"{encode_segment(header)}.{encode_segment(claims)}."


def flip_signature_bit(token: str) -> str:
    """Flip the lowest bit of the last signature byte."""
    signed, signature = token.rsplit(".", 1)
    raw = bytearray(base64url.decode(signature))
    raw[-1] ^= 0x01
    return f"{signed}.{base64url.encode(bytes(raw))}"
