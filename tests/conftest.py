"""Shared test fixtures for jwtseal."""

import pytest

from jwtseal.crypto.keys import generate_key, import_jwk
from jwtseal.crypto.types import KeyRecord
from tests.helpers import KNOWN_EC_JWK


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer JWTSEAL_* variables out of test settings."""
    for name in (
        "JWTSEAL_JWKS_FETCH_TIMEOUT",
        "JWTSEAL_JWKS_WELL_KNOWN_PATH",
        "JWTSEAL_RSA_KEY_SIZE",
        "JWTSEAL_DEFAULT_TOKEN_TTL",
        "JWTSEAL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
async def es256_key() -> KeyRecord:
    """A fresh ES256 signing key."""
    return await generate_key("ES256", kid="es-1")


@pytest.fixture
async def rs256_key() -> KeyRecord:
    """A fresh RS256 signing key."""
    return await generate_key("RS256", kid="rs-1")


@pytest.fixture
async def known_key() -> KeyRecord:
    """The fixed ES256 test key imported with its private part."""
    [record] = await import_jwk("ES256", "known", KNOWN_EC_JWK)
    return record


@pytest.fixture(params=["ES256", "RS256"])
async def signing_key(request: pytest.FixtureRequest) -> KeyRecord:
    """A fresh signing key for each supported algorithm."""
    return await generate_key(request.param, kid=f"{request.param.lower()}-key")
