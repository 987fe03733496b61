"""Validity-window helpers that need no key."""

import math
import time
from datetime import UTC, datetime
from typing import TypedDict

from jwtseal.core.errors import MissingTimeReferenceError
from jwtseal.core.settings import JWTSealSettings
from jwtseal.tokens.codec import epoch_claim, parse


class TimeClaims(TypedDict):
    """The iat/exp claim pair."""

    iat: int
    exp: int


def expires_time(duration_seconds: int | None = None) -> TimeClaims:
    """Return iat (now, whole seconds) and exp = iat + duration."""
    if duration_seconds is None:
        duration_seconds = JWTSealSettings().default_token_ttl
    now = math.floor(time.time())
    return {"iat": now, "exp": now + duration_seconds}


def expired_fraction(
    token: str,
    created_at: datetime | None = None,
    now: datetime | None = None,
) -> float:
    """How far through its validity window a token is.

    Below 0 the token is not yet valid, 0 to 1 it is in its window, above 1 it
    has expired. A token without exp scores 0. ``created_at`` overrides the
    token's own iat as the start point, removing issuer clock skew.
    """
    claims = parse(token).claims
    exp = epoch_claim(claims, "exp")
    iat = epoch_claim(claims, "iat")
    if exp is None:
        return 0
    if iat is None and created_at is None:
        raise MissingTimeReferenceError("No creation time or issued time available")

    created = created_at.timestamp() if created_at is not None else iat
    issued_at = iat if iat is not None else created_at.timestamp()
    current = (now if now is not None else datetime.now(UTC)).timestamp()

    window = exp - issued_at
    elapsed = current - created
    if window <= 0:
        # zero-length window: expired from the start
        return math.inf if elapsed >= 0 else -math.inf
    return elapsed / window
