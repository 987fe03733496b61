"""Token issuance with the first private-capable key."""

from collections.abc import Iterable
from typing import Any

from jwtseal.core.errors import NoSigningKeyError
from jwtseal.core.logging import get_logger
from jwtseal.crypto import base64url
from jwtseal.crypto.algorithms import lookup
from jwtseal.crypto.types import KeyRecord
from jwtseal.tokens.codec import encode_segment

logger = get_logger("issue")


def select_signing_key(keys: KeyRecord | Iterable[KeyRecord]) -> KeyRecord:
    """Pick the first record that carries a private key."""
    candidates = [keys] if isinstance(keys, KeyRecord) else keys
    for key in candidates:
        if key.private_key is not None:
            return key
    raise NoSigningKeyError("No private key supplied")


async def create(keys: KeyRecord | Iterable[KeyRecord], claims: dict[str, Any]) -> str:
    """Sign claims into a compact token with header ``{kid, alg}``."""
    key = select_signing_key(keys)
    spec = lookup(key.alg)
    assert key.private_key is not None

    header_encoded = encode_segment({"kid": key.kid, "alg": str(key.alg)})
    claims_encoded = encode_segment(claims)
    signed = f"{header_encoded}.{claims_encoded}"
    signature = spec.sign(key.private_key, signed.encode("utf-8"))

    logger.debug("JWT issued", kid=key.kid, alg=key.alg, sub=claims.get("sub"))
    return f"{signed}.{base64url.encode(signature)}"
