"""JWK Set retrieval over HTTPS."""

import httpx

from jwtseal.core.errors import FetchFailedError, KeyImportError
from jwtseal.core.logging import get_logger
from jwtseal.core.settings import JWTSealSettings
from jwtseal.crypto.keys import import_jwks
from jwtseal.crypto.types import KeyRecord

logger = get_logger("jwks")


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    response = await client.get(url, follow_redirects=True)
    if not response.is_success:
        logger.warning("JWKS fetch failed", url=url, status_code=response.status_code)
        raise FetchFailedError(url, response.status_code)
    return response


async def import_url_jwks(
    url: str, *, client: httpx.AsyncClient | None = None
) -> list[KeyRecord]:
    """Fetch a JWK Set document and import its public keys.

    No caching and no retries: call again to pick up rotated keys. Pass
    ``client`` to reuse a connection pool or to stub the transport.
    """
    if client is None:
        settings = JWTSealSettings()
        async with httpx.AsyncClient(timeout=settings.jwks_fetch_timeout) as owned:
            response = await _get(owned, url)
    else:
        response = await _get(client, url)

    try:
        document = response.json()
    except ValueError as exc:
        raise KeyImportError(f"JWKS response from {url} is not JSON") from exc
    if not isinstance(document, dict):
        raise KeyImportError(f"JWKS response from {url} is not an object")

    records = await import_jwks(document)
    logger.info("JWKS fetched", url=url, keys_count=len(records))
    return records


async def import_host_jwks(
    hostname: str, *, client: httpx.AsyncClient | None = None
) -> list[KeyRecord]:
    """Import the JWK Set published at a host's well-known path."""
    url = JWTSealSettings().well_known_jwks_url(hostname)
    return await import_url_jwks(url, client=client)
