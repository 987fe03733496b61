"""Type definitions for algorithms, JWKs, JWK Sets, and key records."""

from enum import StrEnum
from typing import Literal

from cryptography.hazmat.primitives.asymmetric.ec import (
    EllipticCurvePrivateKey,
    EllipticCurvePublicKey,
)
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey
from pydantic import BaseModel, ConfigDict, model_validator

PublicKey = EllipticCurvePublicKey | RSAPublicKey
PrivateKey = EllipticCurvePrivateKey | RSAPrivateKey


class Algorithm(StrEnum):
    """Supported JWS signature algorithms."""

    ES256 = "ES256"
    RS256 = "RS256"


class EcPublicJWK(BaseModel):
    """Public-only EC key: every field valid for an EC public JWK, nothing else."""

    model_config = ConfigDict(frozen=True)

    kty: Literal["EC"] = "EC"
    crv: str
    x: str
    y: str


class RsaPublicJWK(BaseModel):
    """Public-only RSA key: modulus and exponent."""

    model_config = ConfigDict(frozen=True)

    kty: Literal["RSA"] = "RSA"
    n: str
    e: str


PublicJWK = EcPublicJWK | RsaPublicJWK


class JWKEntry(BaseModel):
    """Single public JWK entry in a JWKS document."""

    kty: str
    use: str = "sig"
    alg: str
    kid: str | None = None
    crv: str | None = None
    x: str | None = None
    y: str | None = None
    n: str | None = None
    e: str | None = None


class JWKSDocument(BaseModel):
    """JSON Web Key Set document."""

    keys: list[JWKEntry]


class KeyRecord(BaseModel):
    """One signing or verification identity.

    ``public_key`` is always set. ``private_key`` is set only when the record
    was imported from (or generated as) private material.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    alg: Algorithm
    kid: str | None = None
    public_key: PublicKey
    private_key: PrivateKey | None = None

    @model_validator(mode="after")
    def _keys_fit_algorithm(self) -> "KeyRecord":
        from jwtseal.crypto.algorithms import lookup

        spec = lookup(self.alg)
        spec.check_key(self.public_key)
        if self.private_key is not None:
            spec.check_key(self.private_key)
        return self

    @property
    def can_sign(self) -> bool:
        """Whether this record carries private key material."""
        return self.private_key is not None
