"""Library settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict

JWKS_FETCH_TIMEOUT_DEFAULT = 10.0
RSA_KEY_SIZE_DEFAULT = 2048
TOKEN_TTL_DEFAULT = 3600


class JWTSealSettings(BaseSettings):
    """Key retrieval, key generation, and logging settings."""

    model_config = SettingsConfigDict(env_prefix="JWTSEAL_")

    jwks_fetch_timeout: float = JWKS_FETCH_TIMEOUT_DEFAULT
    jwks_well_known_path: str = "/.well-known/jwks.json"
    rsa_key_size: int = RSA_KEY_SIZE_DEFAULT
    default_token_ttl: int = TOKEN_TTL_DEFAULT
    log_level: str = "info"

    def well_known_jwks_url(self, hostname: str) -> str:
        """Build the conventional JWK Set URL for a host."""
        path = "/" + self.jwks_well_known_path.lstrip("/")
        return f"https://{hostname}{path}"
