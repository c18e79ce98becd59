"""Application configuration."""

from functools import lru_cache

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from agenda.core.exceptions import ConfigurationException
from agenda.schemas.config import AppConfig


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_parse_none_str="null",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Agenda API", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api/v1", alias="API_V1_PREFIX")

    # Server
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT")
    reload: bool = Field(default=False, alias="RELOAD")

    # Hosted backend (auth service)
    backend_url: str = Field(..., alias="BACKEND_URL")
    backend_anon_key: str = Field(..., alias="BACKEND_ANON_KEY")
    backend_service_role_key: str = Field(..., alias="BACKEND_SERVICE_ROLE_KEY")
    auth_timeout_seconds: float = Field(default=10.0, alias="AUTH_TIMEOUT_SECONDS")

    # Storage, one DSN per credential tier
    database_url: str = Field(..., alias="DATABASE_URL")
    service_database_url: str = Field(..., alias="SERVICE_DATABASE_URL")
    db_pool_size: int = Field(default=10, alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, alias="DB_MAX_OVERFLOW")
    booking_isolation_level: str = Field(default="SERIALIZABLE", alias="BOOKING_ISOLATION_LEVEL")

    # JWT (tokens are issued by the auth backend and verified locally)
    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str | None = Field(default="authenticated", alias="JWT_AUDIENCE")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Locale
    timezone: str = Field(default="America/Sao_Paulo", alias="TIMEZONE")
    locale: str = Field(default="pt-BR", alias="LOCALE")
    currency: str = Field(default="BRL", alias="CURRENCY")

    # Features
    enable_notifications: bool = Field(default=True, alias="ENABLE_NOTIFICATIONS")
    enable_payments: bool = Field(default=False, alias="ENABLE_PAYMENTS")

    # CORS
    cors_origins_str: str = Field(
        default="http://localhost:3000",
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")

    @property
    def cors_origins(self) -> list[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # Logging
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="json", alias="LOG_FORMAT")

    def app_config(self) -> AppConfig:
        """Public subset of the settings."""
        return AppConfig(
            timezone=self.timezone,
            locale=self.locale,
            currency=self.currency,
            enable_payments=self.enable_payments,
            enable_notifications=self.enable_notifications,
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


def load_settings(**overrides: object) -> Settings:
    """
    Build settings from the environment.

    Args:
        overrides: Explicit values that take precedence over the environment

    Returns:
        Validated settings

    Raises:
        ConfigurationException: If required variables are missing or invalid
    """
    try:
        return Settings(**overrides)  # type: ignore[arg-type]
    except ValidationError as e:
        missing = [
            str(error["loc"][0]) for error in e.errors() if error["type"] == "missing"
        ]
        if missing:
            raise ConfigurationException(
                f"Missing required configuration: {', '.join(sorted(missing))}"
            ) from e
        raise ConfigurationException(f"Invalid configuration: {e}") from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
