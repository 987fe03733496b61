"""Error taxonomy for token issuance, verification, and key import."""


class JWTSealError(Exception):
    """Base error for all jwtseal failures."""

    code = "jwtseal_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UnknownAlgorithmError(JWTSealError):
    """Algorithm identifier is not in the registry."""

    code = "unknown_algorithm"

    def __init__(self, alg: object) -> None:
        self.alg = alg
        super().__init__(f"Unknown algorithm: {alg!r}")


class MalformedTokenError(JWTSealError):
    """Token is not a well-formed three-segment JWT."""

    code = "malformed_token"


class KeyNotFoundError(JWTSealError):
    """No candidate key matches the token's kid and alg."""

    code = "key_not_found"

    def __init__(self, kid: str | None, alg: str | None) -> None:
        self.kid = kid
        self.alg = alg
        super().__init__(f"Key not known: kid={kid!r} alg={alg!r}")


class InvalidSignatureError(JWTSealError):
    """Matching key found but the signature does not verify."""

    code = "invalid_signature"


class ExpiredTokenError(JWTSealError):
    """Token exp is at or before the reference time."""

    code = "expired"


class NotYetValidError(JWTSealError):
    """Token iat is after the reference time."""

    code = "not_yet_valid"


class NoSigningKeyError(JWTSealError):
    """No supplied key record carries a private key."""

    code = "no_signing_key"


class MissingTimeReferenceError(JWTSealError):
    """Neither iat nor an explicit creation time is available."""

    code = "missing_time_reference"


class FetchFailedError(JWTSealError):
    """JWK Set retrieval returned a non-success status."""

    code = "fetch_failed"

    def __init__(self, url: str, status_code: int) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"JWKS fetch failed: {url} returned {status_code}")


class KeyImportError(JWTSealError):
    """Key material is unrecognized or unusable for the algorithm."""

    code = "key_import_failed"
