"""Integration test: issuer publishes a JWK Set, verifier fetches and checks tokens."""

from datetime import UTC, datetime

import httpx
import pytest

from jwtseal.core.errors import InvalidSignatureError, KeyNotFoundError
from jwtseal.crypto.jwks_fetch import import_host_jwks
from jwtseal.crypto.keys import (
    export_jwks,
    export_pem,
    generate_key,
    import_jwk,
    import_pem,
)
from jwtseal.tokens.codec import parse
from jwtseal.tokens.expiry import expired_fraction, expires_time
from jwtseal.tokens.issue import create
from jwtseal.tokens.verify import verify
from tests.helpers import KNOWN_EC_JWK, mock_client

ISSUER_HOST = "issuer.example.com"


def _alter_last_char(token: str) -> str:
    return token[:-1] + ("B" if token[-1] == "A" else "A")


class TestConcreteScenario:
    """ES256 key with known coordinates: issue, parse, verify, tamper."""

    async def test_issue_parse_verify(self) -> None:
        signing = await import_jwk("ES256", "known-key", KNOWN_EC_JWK)
        public = {k: v for k, v in KNOWN_EC_JWK.items() if k != "d"}
        verifying = await import_jwk("ES256", "known-key", public)
        assert verifying[0].private_key is None

        token = await create(signing, {"sub": "me", **expires_time(3600)})

        parsed = parse(token)
        assert parsed.header.model_dump() == {"kid": "known-key", "alg": "ES256"}
        assert parsed.claims["sub"] == "me"
        assert parsed.claims["exp"] == parsed.claims["iat"] + 3600

        claims = await verify(verifying, token)
        assert claims == parsed.claims
        assert 0 <= expired_fraction(token) < 1

        with pytest.raises(InvalidSignatureError):
            await verify(verifying, _alter_last_char(token))


class TestPublishedKeys:
    """Keys distributed through the well-known JWK Set endpoint."""

    async def test_rotation(self) -> None:
        old = await generate_key("RS256", kid="2024-01")
        current = await generate_key("ES256", kid="2024-02")
        published = export_jwks([current, old]).model_dump(exclude_none=True)

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.host == ISSUER_HOST
            assert request.url.path == "/.well-known/jwks.json"
            return httpx.Response(200, json=published)

        async with mock_client(handler) as client:
            keys = await import_host_jwks(ISSUER_HOST, client=client)

        old_token = await create(old, {"sub": "u1", **expires_time(60)})
        new_token = await create([current, old], {"sub": "u2", **expires_time(60)})
        assert (await verify(keys, old_token))["sub"] == "u1"
        assert (await verify(keys, new_token))["sub"] == "u2"

        retired = await generate_key("ES256", kid="2023-12")
        stale_token = await create(retired, {"sub": "u3"})
        with pytest.raises(KeyNotFoundError):
            await verify(keys, stale_token)

    async def test_pem_distribution(self) -> None:
        issuer = await generate_key("RS256", kid="pem-key")
        private_pem = export_pem(issuer, private=True)
        [signing] = await import_pem("RS256", "pem-key", private_pem)
        [verifying] = await import_pem("RS256", "pem-key", export_pem(issuer))

        token = await create(signing, {"sub": "svc", **expires_time(300)})
        now = datetime.now(UTC)
        assert await verify(verifying, token, now=now) == parse(token).claims
