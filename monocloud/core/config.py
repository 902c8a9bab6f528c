"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cache TTLs and probe intervals are validated at load
time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from monocloud.core.constants import CACHE_KEY_SEP


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Every setting has a default; a deployment without Redis credentials
    runs the cache in memory-only mode.
    """

    # App
    app_name: str = "monocloud"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Redis (persistent tier). redis_url wins over host/port when set.
    redis_enabled: bool = True
    redis_url: SecretStr | None = None
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_socket_timeout: float = 5.0

    # Tiered cache
    cache_namespace: str = "monocloud:"
    cache_default_ttl: int = 60 * 60 * 24
    # Lifetime of entries back-filled from Redis into process memory.
    cache_local_ttl: int = 60 * 60
    # None = unbounded local tier (entries only leave on expiry or clear).
    cache_local_max_entries: int | None = None
    cache_probe_interval_seconds: float = 60.0
    cache_operation_timeout_seconds: float = 4.0

    # Per-client TTLs
    cache_ttl_repository: int = 60 * 60 * 24
    cache_ttl_analysis: int = 60 * 60 * 12
    cache_ttl_speech: int = 60 * 60 * 48

    # Admin surface: POST /cache/clear etc. require Authorization: Bearer <key>.
    admin_api_key: SecretStr | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache(self) -> "Settings":
        """Validate cache namespace, TTLs and timing knobs."""
        if not self.cache_namespace.endswith(CACHE_KEY_SEP):
            raise ValueError(
                f"CACHE_NAMESPACE must end with {CACHE_KEY_SEP!r}, got: {self.cache_namespace!r}"
            )
        ttls = {
            "cache_default_ttl": self.cache_default_ttl,
            "cache_local_ttl": self.cache_local_ttl,
            "cache_ttl_repository": self.cache_ttl_repository,
            "cache_ttl_analysis": self.cache_ttl_analysis,
            "cache_ttl_speech": self.cache_ttl_speech,
        }
        for name, value in ttls.items():
            if value <= 0:
                raise ValueError(f"{name.upper()} must be positive, got: {value}")
        if self.cache_probe_interval_seconds <= 0:
            raise ValueError("CACHE_PROBE_INTERVAL_SECONDS must be positive")
        if self.cache_operation_timeout_seconds <= 0:
            raise ValueError("CACHE_OPERATION_TIMEOUT_SECONDS must be positive")
        if self.cache_local_max_entries is not None and self.cache_local_max_entries < 1:
            raise ValueError("CACHE_LOCAL_MAX_ENTRIES must be at least 1 when set")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
