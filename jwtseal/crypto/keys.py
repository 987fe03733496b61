"""Key import adapters, key generation, and JWK/JWKS/PEM export."""

import base64
import binascii
from collections.abc import Iterable, Mapping
from typing import Any

import uuid_utils
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from pydantic import ValidationError

from jwtseal.core.errors import KeyImportError, NoSigningKeyError
from jwtseal.core.logging import get_logger
from jwtseal.core.settings import JWTSealSettings
from jwtseal.crypto.algorithms import AlgorithmSpec, lookup
from jwtseal.crypto.types import (
    JWKEntry,
    JWKSDocument,
    KeyRecord,
    PrivateKey,
    PublicKey,
)

PEM_PRIVATE_TITLE = "BEGIN PRIVATE KEY"
PEM_PUBLIC_TITLE = "BEGIN PUBLIC KEY"

logger = get_logger("keys")


def _record(
    spec: AlgorithmSpec,
    kid: object,
    public_key: PublicKey,
    private_key: PrivateKey | None = None,
) -> KeyRecord:
    try:
        return KeyRecord(
            alg=spec.alg, kid=kid, public_key=public_key, private_key=private_key
        )
    except ValidationError as exc:
        raise KeyImportError(f"Invalid key record for kid {kid!r}: {exc}") from exc


async def import_jwk(
    alg: str, kid: str | None, jwk: Mapping[str, Any]
) -> list[KeyRecord]:
    """Import a JWK; the private key is built only when ``d`` is present."""
    spec = lookup(alg)
    private_key = spec.load_private_jwk(jwk) if "d" in jwk else None
    public_key = spec.load_public_jwk(spec.public_jwk(jwk))
    logger.debug("Imported JWK", alg=spec.alg, kid=kid, private=private_key is not None)
    return [_record(spec, kid, public_key, private_key)]


def _pem_body(lines: list[str]) -> bytes:
    body = "".join(line for line in lines if not line.startswith("--"))
    try:
        return base64.b64decode(body, validate=True)
    except binascii.Error as exc:
        raise KeyImportError(f"PEM body is not valid base64: {exc}") from exc


async def import_pem(alg: str, kid: str | None, pem: str) -> list[KeyRecord]:
    """Import a PKCS8 private key or SPKI public key from PEM text.

    The PEM title decides the key type. A private key yields a record that also
    carries its derived public key. Any other title (for example
    ``BEGIN RSA PRIVATE KEY``) is rejected; convert such keys to PKCS8 first
    with ``openssl pkcs8 -topk8 -nocrypt``.
    """
    spec = lookup(alg)
    lines = [line.strip() for line in pem.split("\n") if line.strip()]
    if not lines:
        raise KeyImportError("Empty PEM input")
    title = lines[0].replace("-", "").strip()
    der = _pem_body(lines)

    try:
        if title == PEM_PRIVATE_TITLE:
            private_key = serialization.load_der_private_key(der, password=None)
            spec.check_key(private_key)
            public_key = private_key.public_key()
        elif title == PEM_PUBLIC_TITLE:
            private_key = None
            public_key = serialization.load_der_public_key(der)
            spec.check_key(public_key)
        else:
            raise KeyImportError(f"Unrecognized PEM type: {title!r}")
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise KeyImportError(f"Unable to load PEM key: {exc}") from exc

    logger.debug("Imported PEM", alg=spec.alg, kid=kid, private=private_key is not None)
    return [_record(spec, kid, public_key, private_key)]


async def import_jwks(jwk_set: Mapping[str, Any]) -> list[KeyRecord]:
    """Import the public keys of a JWK Set, skipping entries without ``alg``."""
    entries = jwk_set.get("keys")
    if not isinstance(entries, list):
        raise KeyImportError("JWK Set has no 'keys' list")

    records: list[KeyRecord] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            raise KeyImportError("JWK Set entry is not an object")
        alg = entry.get("alg")
        kid = entry.get("kid")
        if not alg:
            logger.debug("Skipping JWK without alg", kid=kid)
            continue
        spec = lookup(alg)
        public_key = spec.load_public_jwk(spec.public_jwk(entry))
        records.append(_record(spec, kid, public_key))

    logger.debug("Imported JWK Set", keys_count=len(records), entries=len(entries))
    return records


async def generate_key(alg: str, kid: str | None = None) -> KeyRecord:
    """Generate a new signing key; kid defaults to a UUIDv7."""
    spec = lookup(alg)
    settings = JWTSealSettings()
    private_key = spec.generate_private_key(settings.rsa_key_size)
    return KeyRecord(
        alg=spec.alg,
        kid=kid if kid is not None else str(uuid_utils.uuid7()),
        public_key=private_key.public_key(),
        private_key=private_key,
    )


def export_jwk(record: KeyRecord, *, private: bool = False) -> dict[str, str]:
    """Export a key record as a JWK, public fields only unless ``private``."""
    spec = lookup(record.alg)
    if private and record.private_key is None:
        raise NoSigningKeyError(f"Key {record.kid!r} has no private key to export")
    fields = spec.to_jwk(record.private_key if private else record.public_key)
    fields.update(alg=str(record.alg), use="sig")
    if record.kid is not None:
        fields["kid"] = record.kid
    return fields


def export_jwks(records: Iterable[KeyRecord]) -> JWKSDocument:
    """Build a public JWK Set; the first record per (kid, alg) wins."""
    seen: set[tuple[str | None, str]] = set()
    entries: list[JWKEntry] = []
    for record in records:
        identity = (record.kid, str(record.alg))
        if identity in seen:
            continue
        seen.add(identity)
        entries.append(JWKEntry.model_validate(export_jwk(record)))
    return JWKSDocument(keys=entries)


def export_pem(record: KeyRecord, *, private: bool = False) -> str:
    """Export SPKI public PEM, or unencrypted PKCS8 private PEM."""
    if not private:
        return record.public_key.public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ).decode()
    if record.private_key is None:
        raise NoSigningKeyError(f"Key {record.kid!r} has no private key to export")
    return record.private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
