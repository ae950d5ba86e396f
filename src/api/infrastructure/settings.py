"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Production deployments should set all values explicitly.
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database connection settings.

    Environment variables:
        USER_SERVICE_DB_HOST: Database host (default: localhost)
        USER_SERVICE_DB_PORT: Database port (default: 5432)
        USER_SERVICE_DB_DATABASE: Database name (default: users)
        USER_SERVICE_DB_USERNAME: Database user (default: users)
        USER_SERVICE_DB_PASSWORD: Database password (required in production)
        USER_SERVICE_DB_POOL_SIZE: Persistent connections in pool (default: 5)
        USER_SERVICE_DB_MAX_OVERFLOW: Extra connections above pool size (default: 5)
        USER_SERVICE_DB_ECHO: Log emitted SQL (default: false)
    """

    model_config = SettingsConfigDict(
        env_prefix="USER_SERVICE_DB_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="localhost", description="Database host")
    port: int = Field(default=5432, description="Database port")
    database: str = Field(default="users", description="Database name")
    username: str = Field(default="users", description="Database username")
    password: SecretStr = Field(
        default=SecretStr(""),
        description="Database password",
    )
    pool_size: int = Field(
        default=5,
        description="Persistent connections kept in the pool",
        ge=1,
        le=100,
    )
    max_overflow: int = Field(
        default=5,
        description="Connections allowed above pool_size under load",
        ge=0,
        le=100,
    )
    echo: bool = Field(default=False, description="Log emitted SQL statements")

    @model_validator(mode="after")
    def validate_pool_settings(self) -> "DatabaseSettings":
        """Validate the total pool stays within bounds."""
        if self.pool_size + self.max_overflow > 100:
            raise ValueError(
                f"pool_size ({self.pool_size}) + max_overflow "
                f"({self.max_overflow}) must be <= 100"
            )
        return self

    @property
    def connection_string(self) -> str:
        """Generate a connection string (without password for logging)."""
        return f"postgresql://{self.username}@{self.host}:{self.port}/{self.database}"


class OIDCSettings(BaseSettings):
    """OIDC identity provider settings used for bearer token validation.

    Environment variables:
        USER_SERVICE_OIDC_ISSUER_URL: Issuer (realm) URL tokens must carry
        USER_SERVICE_OIDC_AUDIENCE: Expected audience claim
        USER_SERVICE_OIDC_ADDITIONAL_ISSUERS: Extra accepted issuers (JSON list)
        USER_SERVICE_OIDC_VALIDATE_AUDIENCE: Verify the aud claim (default: true)
        USER_SERVICE_OIDC_JWKS_CACHE_TTL_SECONDS: JWKS cache lifetime (default: 86400)
    """

    model_config = SettingsConfigDict(
        env_prefix="USER_SERVICE_OIDC_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer_url: str = Field(
        default="http://localhost:8080/realms/users",
        description="OIDC issuer URL",
    )
    audience: str = Field(default="user-service", description="Expected audience")
    additional_issuers: list[str] = Field(
        default_factory=list,
        description="Other issuer URLs accepted for the same realm",
    )
    validate_audience: bool = Field(
        default=True,
        description="Whether the aud claim must match the audience",
    )
    jwks_cache_ttl_seconds: int = Field(
        default=86400,
        description="How long fetched signing keys are cached",
        ge=0,
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections.

    Environment variables:
        USER_SERVICE_APP_NAME: Application name shown in the OpenAPI document
        USER_SERVICE_ENVIRONMENT: Deployment environment name (default: Production)
        USER_SERVICE_ADMIN_ROLE: Role granting administrative access (default: Admins)
        USER_SERVICE_LOG_LEVEL: Minimum log level (default: INFO)
    """

    model_config = SettingsConfigDict(
        env_prefix="USER_SERVICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    app_name: str = Field(default="User Service API", description="Application name")
    environment: str = Field(
        default="Production",
        description="Deployment environment (Development, Staging, Production)",
    )
    admin_role: str = Field(
        default="Admins",
        description="Role name required for administrative endpoints",
    )
    log_level: str = Field(default="INFO", description="Minimum log level")

    @property
    def is_development(self) -> bool:
        """Whether the service runs in the Development environment."""
        return self.environment.lower() == "development"

    @property
    def database(self) -> DatabaseSettings:
        """Get database settings."""
        return get_database_settings()

    @property
    def oidc(self) -> OIDCSettings:
        """Get OIDC settings."""
        return get_oidc_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_database_settings() -> DatabaseSettings:
    """Get cached database settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return DatabaseSettings()


@lru_cache
def get_oidc_settings() -> OIDCSettings:
    """Get cached OIDC settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return OIDCSettings()
