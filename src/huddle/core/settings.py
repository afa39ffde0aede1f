"""Application settings and configuration.

This module defines all configuration options for the Huddle application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Huddle", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_base_url: str = Field(default="http://localhost:3000", alias="APP_BASE_URL")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./huddle.db", alias="DATABASE_URL")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Session tokens issued by the identity provider
    auth_jwt_key: str = Field(default="change-me", alias="AUTH_JWT_KEY")
    auth_jwt_algorithm: str = Field(default="HS256", alias="AUTH_JWT_ALGORITHM")
    auth_session_cookie: str = Field(default="__session", alias="AUTH_SESSION_COOKIE")

    # Identity provider backend API
    identity_api_url: str = Field(default="https://api.clerk.com", alias="IDENTITY_API_URL")
    identity_secret_key: str | None = Field(default=None, alias="IDENTITY_SECRET_KEY")

    # Country/state/city lookup API
    location_api_key: str | None = Field(default=None, alias="COUNTRY_STATE_CITY_API_KEY")
    location_api_url: str = Field(
        default="https://api.countrystatecity.in/v1",
        alias="COUNTRY_STATE_CITY_BASE_URL",
    )
    location_cache_seconds: int = Field(default=86_400, alias="LOCATION_CACHE_SECONDS")

    # Object storage for community images
    storage_url: str | None = Field(default=None, alias="STORAGE_URL")
    storage_service_key: str | None = Field(default=None, alias="STORAGE_SERVICE_KEY")
    storage_bucket: str = Field(default="community-images", alias="STORAGE_BUCKET")

    # Outbound HTTP behaviour
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")
    http_max_retries: int = Field(default=3, alias="HTTP_MAX_RETRIES")
    http_retry_delay_seconds: float = Field(default=1.0, alias="HTTP_RETRY_DELAY_SECONDS")

    # Image handling
    image_max_bytes: int = Field(default=1024 * 1024, alias="IMAGE_MAX_BYTES")
    image_max_width: int = Field(default=800, alias="IMAGE_MAX_WIDTH")
    image_quality: float = Field(default=0.8, alias="IMAGE_QUALITY")
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return a sync-compatible database URL for tooling.

        Converts asyncpg URLs to psycopg for synchronous database operations
        like Alembic migrations.
        """
        url = self.database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url

    @property
    def identity_enabled(self) -> bool:
        return bool(self.identity_secret_key)

    @property
    def storage_enabled(self) -> bool:
        return bool(self.storage_url and self.storage_service_key)


settings = Settings()
