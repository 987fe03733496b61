"""Tests for the algorithm registry."""

import pytest

from jwtseal.core.errors import UnknownAlgorithmError
from jwtseal.crypto.algorithms import ALGORITHMS, EcdsaSpec, RsaPkcs1Spec, lookup
from jwtseal.crypto.types import Algorithm, KeyRecord

DATA = b"header.claims"


class TestLookup:
    """Tests for algorithm identifier lookup."""

    def test_es256(self) -> None:
        spec = lookup("ES256")
        assert isinstance(spec, EcdsaSpec)
        assert spec.alg == Algorithm.ES256
        assert spec.crv == "P-256"

    def test_rs256(self) -> None:
        spec = lookup("RS256")
        assert isinstance(spec, RsaPkcs1Spec)
        assert spec.alg == Algorithm.RS256

    def test_accepts_enum_member(self) -> None:
        assert lookup(Algorithm.ES256) is ALGORITHMS[Algorithm.ES256]

    @pytest.mark.parametrize("alg", ["HS256", "es256", "none", "", None])
    def test_unknown(self, alg: object) -> None:
        with pytest.raises(UnknownAlgorithmError) as info:
            lookup(alg)
        assert info.value.code == "unknown_algorithm"

    def test_registry_is_read_only(self) -> None:
        rs256 = ALGORITHMS[Algorithm.RS256]
        with pytest.raises(TypeError):
            ALGORITHMS[Algorithm.ES256] = rs256  # type: ignore[index]


class TestEcdsa:
    """Tests for ES256 signing parameters."""

    async def test_signature_is_raw_r_s(self, es256_key: KeyRecord) -> None:
        spec = lookup("ES256")
        assert es256_key.private_key is not None
        signature = spec.sign(es256_key.private_key, DATA)
        assert len(signature) == 64
        assert spec.verify(es256_key.public_key, signature, DATA)

    async def test_rejects_other_data(self, es256_key: KeyRecord) -> None:
        spec = lookup("ES256")
        assert es256_key.private_key is not None
        signature = spec.sign(es256_key.private_key, DATA)
        assert not spec.verify(es256_key.public_key, signature, b"other")

    async def test_rejects_wrong_length(self, es256_key: KeyRecord) -> None:
        spec = lookup("ES256")
        assert es256_key.private_key is not None
        signature = spec.sign(es256_key.private_key, DATA)
        assert not spec.verify(es256_key.public_key, signature[:-1], DATA)
        assert not spec.verify(es256_key.public_key, b"", DATA)

    async def test_jwk_coordinates_are_full_width(self, es256_key: KeyRecord) -> None:
        fields = lookup("ES256").to_jwk(es256_key.public_key)
        assert fields["kty"] == "EC"
        assert len(fields["x"]) == 43
        assert len(fields["y"]) == 43
        assert "d" not in fields


class TestRsa:
    """Tests for RS256 signing parameters."""

    async def test_sign_and_verify(self, rs256_key: KeyRecord) -> None:
        spec = lookup("RS256")
        assert rs256_key.private_key is not None
        signature = spec.sign(rs256_key.private_key, DATA)
        assert len(signature) == 256
        assert spec.verify(rs256_key.public_key, signature, DATA)

    async def test_rejects_other_data(self, rs256_key: KeyRecord) -> None:
        spec = lookup("RS256")
        assert rs256_key.private_key is not None
        signature = spec.sign(rs256_key.private_key, DATA)
        assert not spec.verify(rs256_key.public_key, signature, DATA + b"x")

    async def test_private_jwk_has_crt_fields(self, rs256_key: KeyRecord) -> None:
        assert rs256_key.private_key is not None
        fields = lookup("RS256").to_jwk(rs256_key.private_key)
        assert {"n", "e", "d", "p", "q", "dp", "dq", "qi"} <= set(fields)
        assert fields["e"] == "AQAB"
