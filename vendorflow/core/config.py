"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific required fields (e.g. DATABASE_URL,
SUPABASE_URL) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

STORAGE_BACKENDS = ("memory", "postgres", "supabase")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults; validate_backend checks that
    the selected storage backend has what it needs.
    """

    # App
    app_name: str = "vendorflow"
    app_version: str = "1.0.0"
    debug: bool = False

    # Storage: "memory" (process-local), "postgres" (SQLAlchemy) or "supabase" (PostgREST)
    storage_backend: str = "memory"
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    supabase_url: str = ""
    supabase_service_key: SecretStr | None = None
    supabase_timeout_seconds: float = 30.0

    # Sharing chain
    share_link_base_url: str = "http://localhost:5000"
    share_token_bytes: int = 32  # 256-bit tokens
    share_token_max_attempts: int = 5
    # When True a root share needs an active grant from sharer to recipient.
    require_sharing_grant: bool = True
    # Depth cap applied to a root share that no grant governs (-1 = unlimited).
    default_max_chain_depth: int = 3
    max_chain_depth_limit: int = 10

    # HTTP
    allowed_origins: str = "http://localhost:3000,http://localhost:5000"
    user_id_header: str = "X-User-ID"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backend(self) -> "Settings":
        """Validate storage backend selection and sharing limits.

        - postgres: DATABASE_URL required.
        - supabase: SUPABASE_URL and SUPABASE_SERVICE_KEY required.
        """
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"storage_backend must be one of {', '.join(STORAGE_BACKENDS)}, "
                f"got: {self.storage_backend!r}"
            )
        if self.storage_backend == "postgres" and not self.database_url:
            raise ValueError(
                "DATABASE_URL is required when storage_backend is 'postgres'. "
                "Set in environment or .env file."
            )
        if self.storage_backend == "supabase":
            has_key = (
                self.supabase_service_key
                and self.supabase_service_key.get_secret_value()
            )
            if not self.supabase_url or not has_key:
                raise ValueError(
                    "When storage_backend is 'supabase', set SUPABASE_URL and "
                    "SUPABASE_SERVICE_KEY."
                )
        if self.share_token_bytes < 16:
            raise ValueError("SHARE_TOKEN_BYTES must be at least 16")
        if self.max_chain_depth_limit < 1:
            raise ValueError("MAX_CHAIN_DEPTH_LIMIT must be at least 1")
        if self.default_max_chain_depth != -1 and not (
            1 <= self.default_max_chain_depth <= self.max_chain_depth_limit
        ):
            raise ValueError(
                "DEFAULT_MAX_CHAIN_DEPTH must be -1 or between 1 and MAX_CHAIN_DEPTH_LIMIT"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
