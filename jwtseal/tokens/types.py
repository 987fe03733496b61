"""Type definitions for parsed tokens."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class TokenHeader(BaseModel):
    """JOSE header; fields other than kid and alg are kept as extras."""

    model_config = ConfigDict(extra="allow", frozen=True)

    kid: str | None = None
    alg: str | None = None


class ParsedToken(BaseModel):
    """A decoded, unverified token.

    ``signed`` is the ``header.claims`` prefix exactly as transmitted; the
    signature is checked against it, never against re-encoded JSON.
    """

    model_config = ConfigDict(frozen=True)

    header: TokenHeader
    claims: dict[str, Any]
    signature: bytes
    signed: str
