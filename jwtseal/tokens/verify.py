"""Token verification against a caller-supplied list of candidate keys."""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from jwtseal.core.errors import (
    ExpiredTokenError,
    InvalidSignatureError,
    KeyNotFoundError,
    NotYetValidError,
)
from jwtseal.core.logging import get_logger
from jwtseal.crypto.algorithms import lookup
from jwtseal.crypto.types import KeyRecord
from jwtseal.tokens.codec import epoch_claim, parse

logger = get_logger("verify")


def check_times(claims: dict[str, Any], now: datetime) -> None:
    """Reject tokens whose exp has passed or whose iat is in the future."""
    epoch_seconds = now.timestamp()
    exp = epoch_claim(claims, "exp")
    if exp is not None and epoch_seconds >= exp:
        raise ExpiredTokenError("JWT expired")
    iat = epoch_claim(claims, "iat")
    if iat is not None and iat > epoch_seconds:
        raise NotYetValidError("JWT not yet valid")


async def verify(
    keys: KeyRecord | Iterable[KeyRecord],
    text: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Verify a token and return its claims.

    The first key whose kid and alg both equal the header's is used. A bad
    signature from that key is final; other candidates are not tried.
    """
    token = parse(text, strict_signature=False)
    candidates = [keys] if isinstance(keys, KeyRecord) else keys
    kid, alg = token.header.kid, token.header.alg

    for key in candidates:
        if key.kid != kid or key.alg != alg:
            continue

        spec = lookup(key.alg)
        signed = token.signed.encode("utf-8")
        if not spec.verify(key.public_key, token.signature, signed):
            logger.warning("JWT signature invalid", kid=kid, alg=alg)
            raise InvalidSignatureError("JWT not valid")

        check_times(token.claims, now if now is not None else datetime.now(UTC))
        logger.debug("JWT verified", kid=kid, alg=alg, sub=token.claims.get("sub"))
        return token.claims

    raise KeyNotFoundError(kid, alg)
