"""Algorithm registry: key-import and signature parameters per JWS algorithm."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from pydantic import ValidationError

from jwtseal.core.errors import KeyImportError, UnknownAlgorithmError
from jwtseal.crypto.base64url import Base64urlError, b64_to_int, encode, int_to_b64
from jwtseal.crypto.types import (
    Algorithm,
    EcPublicJWK,
    PrivateKey,
    PublicJWK,
    PublicKey,
    RsaPublicJWK,
)

RSA_PUBLIC_EXPONENT = 65537


class AlgorithmSpec(ABC):
    """Import, sign, and verify parameters for one algorithm."""

    alg: Algorithm
    kty: str

    @abstractmethod
    def public_jwk(self, jwk: Mapping[str, Any]) -> PublicJWK:
        """Build the public-only JWK for this key type from any JWK."""

    @abstractmethod
    def load_public_jwk(self, jwk: PublicJWK) -> PublicKey:
        """Import a public key handle from a public-only JWK."""

    @abstractmethod
    def load_private_jwk(self, jwk: Mapping[str, Any]) -> PrivateKey:
        """Import a private key handle from a JWK carrying ``d``."""

    @abstractmethod
    def to_jwk(self, key: PublicKey | PrivateKey) -> dict[str, str]:
        """Export key-type fields of a key (private fields for private keys)."""

    @abstractmethod
    def check_key(self, key: object) -> None:
        """Raise KeyImportError unless key fits this algorithm."""

    @abstractmethod
    def generate_private_key(self, rsa_key_size: int) -> PrivateKey:
        """Create a fresh private key for this algorithm."""

    @abstractmethod
    def sign(self, private_key: PrivateKey, data: bytes) -> bytes:
        """Sign data, returning the JWS signature bytes."""

    @abstractmethod
    def verify(self, public_key: PublicKey, signature: bytes, data: bytes) -> bool:
        """Check a JWS signature; False when it does not verify."""

    def _validate(self, model: type[PublicJWK], jwk: Mapping[str, Any]) -> PublicJWK:
        try:
            return model.model_validate(dict(jwk))
        except ValidationError as exc:
            raise KeyImportError(f"JWK not usable for {self.alg}: {exc}") from exc

    def _int(self, jwk: Mapping[str, Any], name: str) -> int:
        value = jwk.get(name)
        if not isinstance(value, str):
            raise KeyImportError(f"JWK field {name!r} missing for {self.alg}")
        try:
            return b64_to_int(value)
        except Base64urlError as exc:
            raise KeyImportError(f"JWK field {name!r} is not base64url") from exc


class EcdsaSpec(AlgorithmSpec):
    """ECDSA over a named curve; signatures are fixed-width ``r || s``."""

    kty = "EC"

    def __init__(
        self,
        alg: Algorithm,
        curve: ec.EllipticCurve,
        crv: str,
        hash_algorithm: hashes.HashAlgorithm,
    ) -> None:
        self.alg = alg
        self.curve = curve
        self.crv = crv
        self.hash_algorithm = hash_algorithm
        self.coordinate_size = (curve.key_size + 7) // 8

    def public_jwk(self, jwk: Mapping[str, Any]) -> EcPublicJWK:
        model = self._validate(EcPublicJWK, jwk)
        if model.crv != self.crv:
            raise KeyImportError(
                f"{self.alg} requires curve {self.crv}, got {model.crv}"
            )
        return model

    def load_public_jwk(self, jwk: EcPublicJWK) -> ec.EllipticCurvePublicKey:
        fields = jwk.model_dump()
        numbers = ec.EllipticCurvePublicNumbers(
            self._int(fields, "x"), self._int(fields, "y"), self.curve
        )
        try:
            return numbers.public_key()
        except ValueError as exc:
            raise KeyImportError(f"Invalid EC point: {exc}") from exc

    def load_private_jwk(self, jwk: Mapping[str, Any]) -> ec.EllipticCurvePrivateKey:
        self.public_jwk(jwk)
        try:
            private_key = ec.derive_private_key(self._int(jwk, "d"), self.curve)
        except ValueError as exc:
            raise KeyImportError(f"Invalid EC private value: {exc}") from exc
        derived = private_key.public_key().public_numbers()
        if (derived.x, derived.y) != (self._int(jwk, "x"), self._int(jwk, "y")):
            raise KeyImportError("EC private key does not match x/y")
        return private_key

    def to_jwk(self, key: PublicKey | PrivateKey) -> dict[str, str]:
        self.check_key(key)
        public = key
        if isinstance(key, ec.EllipticCurvePrivateKey):
            public = key.public_key()
        numbers = public.public_numbers()
        fields = {
            "kty": self.kty,
            "crv": self.crv,
            "x": self._coordinate(numbers.x),
            "y": self._coordinate(numbers.y),
        }
        if isinstance(key, ec.EllipticCurvePrivateKey):
            fields["d"] = self._coordinate(key.private_numbers().private_value)
        return fields

    def check_key(self, key: object) -> None:
        if not isinstance(key, ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey):
            raise KeyImportError(f"{self.alg} requires an EC key")
        if key.curve.name != self.curve.name:
            raise KeyImportError(f"{self.alg} requires curve {self.crv}")

    def generate_private_key(self, rsa_key_size: int) -> ec.EllipticCurvePrivateKey:
        return ec.generate_private_key(self.curve)

    def sign(self, private_key: PrivateKey, data: bytes) -> bytes:
        assert isinstance(private_key, ec.EllipticCurvePrivateKey)
        der = private_key.sign(data, ec.ECDSA(self.hash_algorithm))
        r, s = decode_dss_signature(der)
        return r.to_bytes(self.coordinate_size, "big") + s.to_bytes(
            self.coordinate_size, "big"
        )

    def verify(self, public_key: PublicKey, signature: bytes, data: bytes) -> bool:
        assert isinstance(public_key, ec.EllipticCurvePublicKey)
        if len(signature) != 2 * self.coordinate_size:
            return False
        r = int.from_bytes(signature[: self.coordinate_size], "big")
        s = int.from_bytes(signature[self.coordinate_size :], "big")
        try:
            public_key.verify(
                encode_dss_signature(r, s), data, ec.ECDSA(self.hash_algorithm)
            )
        except InvalidSignature:
            return False
        return True

    def _coordinate(self, value: int) -> str:
        # RFC 7518 6.2.1.2: coordinates are full curve width
        return encode(value.to_bytes(self.coordinate_size, "big"))


class RsaPkcs1Spec(AlgorithmSpec):
    """RSASSA-PKCS1-v1_5 with a fixed hash."""

    kty = "RSA"

    def __init__(self, alg: Algorithm, hash_algorithm: hashes.HashAlgorithm) -> None:
        self.alg = alg
        self.hash_algorithm = hash_algorithm

    def public_jwk(self, jwk: Mapping[str, Any]) -> RsaPublicJWK:
        return self._validate(RsaPublicJWK, jwk)

    def load_public_jwk(self, jwk: RsaPublicJWK) -> rsa.RSAPublicKey:
        fields = jwk.model_dump()
        try:
            return rsa.RSAPublicNumbers(
                self._int(fields, "e"), self._int(fields, "n")
            ).public_key()
        except ValueError as exc:
            raise KeyImportError(f"Invalid RSA public key: {exc}") from exc

    def load_private_jwk(self, jwk: Mapping[str, Any]) -> rsa.RSAPrivateKey:
        self.public_jwk(jwk)
        n = self._int(jwk, "n")
        e = self._int(jwk, "e")
        d = self._int(jwk, "d")
        try:
            if "p" in jwk and "q" in jwk:
                p, q = self._int(jwk, "p"), self._int(jwk, "q")
            else:
                p, q = rsa.rsa_recover_prime_factors(n, e, d)
            dmp1 = self._int(jwk, "dp") if "dp" in jwk else rsa.rsa_crt_dmp1(d, p)
            dmq1 = self._int(jwk, "dq") if "dq" in jwk else rsa.rsa_crt_dmq1(d, q)
            iqmp = self._int(jwk, "qi") if "qi" in jwk else rsa.rsa_crt_iqmp(p, q)
            numbers = rsa.RSAPrivateNumbers(
                p=p,
                q=q,
                d=d,
                dmp1=dmp1,
                dmq1=dmq1,
                iqmp=iqmp,
                public_numbers=rsa.RSAPublicNumbers(e, n),
            )
            return numbers.private_key()
        except ValueError as exc:
            raise KeyImportError(f"Invalid RSA private key: {exc}") from exc

    def to_jwk(self, key: PublicKey | PrivateKey) -> dict[str, str]:
        self.check_key(key)
        public = key.public_key() if isinstance(key, rsa.RSAPrivateKey) else key
        numbers = public.public_numbers()
        fields = {
            "kty": self.kty,
            "n": int_to_b64(numbers.n),
            "e": int_to_b64(numbers.e),
        }
        if isinstance(key, rsa.RSAPrivateKey):
            private = key.private_numbers()
            fields.update(
                d=int_to_b64(private.d),
                p=int_to_b64(private.p),
                q=int_to_b64(private.q),
                dp=int_to_b64(private.dmp1),
                dq=int_to_b64(private.dmq1),
                qi=int_to_b64(private.iqmp),
            )
        return fields

    def check_key(self, key: object) -> None:
        if not isinstance(key, rsa.RSAPrivateKey | rsa.RSAPublicKey):
            raise KeyImportError(f"{self.alg} requires an RSA key")

    def generate_private_key(self, rsa_key_size: int) -> rsa.RSAPrivateKey:
        return rsa.generate_private_key(
            public_exponent=RSA_PUBLIC_EXPONENT,
            key_size=rsa_key_size,
        )

    def sign(self, private_key: PrivateKey, data: bytes) -> bytes:
        assert isinstance(private_key, rsa.RSAPrivateKey)
        return private_key.sign(data, padding.PKCS1v15(), self.hash_algorithm)

    def verify(self, public_key: PublicKey, signature: bytes, data: bytes) -> bool:
        assert isinstance(public_key, rsa.RSAPublicKey)
        if len(signature) != (public_key.key_size + 7) // 8:
            return False
        try:
            public_key.verify(signature, data, padding.PKCS1v15(), self.hash_algorithm)
        except InvalidSignature:
            return False
        return True


ALGORITHMS: Mapping[Algorithm, AlgorithmSpec] = MappingProxyType(
    {
        Algorithm.ES256: EcdsaSpec(
            Algorithm.ES256, ec.SECP256R1(), "P-256", hashes.SHA256()
        ),
        Algorithm.RS256: RsaPkcs1Spec(Algorithm.RS256, hashes.SHA256()),
    }
)


def lookup(alg: object) -> AlgorithmSpec:
    """Return the spec for an algorithm identifier."""
    try:
        return ALGORITHMS[Algorithm(alg)]
    except (ValueError, TypeError, KeyError) as exc:
        raise UnknownAlgorithmError(alg) from exc
