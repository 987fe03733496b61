"""Compact JWS serialization: split, decode, and encode token segments."""

import json
from typing import Any

from pydantic import ValidationError

from jwtseal.core.errors import MalformedTokenError
from jwtseal.crypto import base64url
from jwtseal.tokens.types import ParsedToken, TokenHeader

TOKEN_SEGMENTS = 3


def _decode_object(segment: str, name: str) -> dict[str, Any]:
    try:
        value = json.loads(base64url.decode_text(segment))
    except base64url.Base64urlError as exc:
        raise MalformedTokenError(f"JWT {name} is not valid base64url") from exc
    except json.JSONDecodeError as exc:
        raise MalformedTokenError(f"JWT {name} is not valid JSON") from exc
    if not isinstance(value, dict):
        raise MalformedTokenError(f"JWT {name} is not a JSON object")
    return value


def parse(text: str, *, strict_signature: bool = True) -> ParsedToken:
    """Decode a compact token without checking its signature.

    With ``strict_signature=False`` a signature segment that is not canonical
    base64url decodes to empty bytes, which no key accepts.
    """
    parts = text.strip().split(".")
    if len(parts) != TOKEN_SEGMENTS:
        raise MalformedTokenError(
            f"JWT must have {TOKEN_SEGMENTS} segments, got {len(parts)}"
        )
    header_encoded, claims_encoded, signature_encoded = parts

    try:
        header = TokenHeader.model_validate(_decode_object(header_encoded, "header"))
    except ValidationError as exc:
        raise MalformedTokenError(f"JWT header has invalid kid/alg: {exc}") from exc
    claims = _decode_object(claims_encoded, "claims")
    try:
        signature = base64url.decode(signature_encoded)
    except base64url.Base64urlError as exc:
        if strict_signature:
            raise MalformedTokenError("JWT signature is not valid base64url") from exc
        signature = b""

    return ParsedToken(
        header=header,
        claims=claims,
        signature=signature,
        signed=f"{header_encoded}.{claims_encoded}",
    )


def get_unverified_header(text: str) -> TokenHeader:
    """Return a token's header without verifying it."""
    return parse(text).header


def encode_segment(value: dict[str, Any]) -> str:
    """Serialize a JSON object (insertion order kept) as a base64url segment."""
    text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return base64url.encode_text(text)


def epoch_claim(claims: dict[str, Any], name: str) -> float | None:
    """Read a numeric epoch-seconds claim; None when absent."""
    value = claims.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise MalformedTokenError(f"JWT claim {name!r} must be a number")
    return value
