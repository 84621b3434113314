"""
Application configuration management.

Loads settings from environment variables with validation.
All secrets should be provided via environment variables, never hardcoded.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses pydantic-settings for validation and type coercion.
    All sensitive values should come from environment variables.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Application Settings
    # ==========================================================================
    environment: str = Field(default="development",
                             description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")
    app_name: str = Field(default="OnScript Analytics",
                          description="Application name")
    app_version: str = Field(
        default="1.0.0", description="Application version")

    # ==========================================================================
    # Server Settings
    # ==========================================================================
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")

    # ==========================================================================
    # Database Settings
    # ==========================================================================
    database_url: str = Field(
        default="sqlite:///./onscript.db",
        description="Database connection string (PostgreSQL in production)"
    )
    db_pool_size: int = Field(
        default=10, description="Database connection pool size")
    db_max_overflow: int = Field(
        default=10, description="Max overflow connections")
    db_pool_recycle: int = Field(
        default=1800, description="Connection recycle time in seconds (30 min)")
    db_pool_timeout: int = Field(
        default=30, description="Connection checkout timeout in seconds")

    # ==========================================================================
    # Security Settings
    # ==========================================================================
    secret_key: str = Field(
        default="dev-secret-key-change-in-production",
        description="Secret key for JWT verification"
    )
    encryption_key: str = Field(
        default="dev-encryption-key-32bytes!",
        description="Key used to encrypt stored Ringba API keys (32 bytes)"
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="JWT access token expiration in minutes"
    )
    login_path: str = Field(
        default="/login",
        description="Where protected pages send unauthenticated visitors"
    )

    # ==========================================================================
    # CORS Settings
    # ==========================================================================
    cors_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="Comma-separated list of allowed CORS origins"
    )

    # ==========================================================================
    # Logging
    # ==========================================================================
    log_level: str = Field(default="INFO", description="Logging level")

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"

    # ==========================================================================
    # Validators
    # ==========================================================================
    @field_validator("encryption_key")
    @classmethod
    def validate_encryption_key(cls, v: str) -> str:
        """
        Validate encryption key length.

        Fernet key derivation expects exactly 32 bytes of input.
        """
        if len(v) < 32:
            # Pad key if too short (development only)
            v = v.ljust(32, "0")
        elif len(v) > 32:
            v = v[:32]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()


class RingbaEnvironment(BaseSettings):
    """
    Ringba credentials as currently present in the process environment.

    Deliberately not cached: every instantiation re-reads RINGBA_API_KEY
    and RINGBA_ACCOUNT_ID so diagnostics reflect the live environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="RINGBA_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: Optional[str] = Field(default=None, description="Ringba API key")
    account_id: Optional[str] = Field(default=None, description="Ringba account identifier")

    @field_validator("api_key", "account_id")
    @classmethod
    def blank_as_missing(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty strings the same as unset variables."""
        return v or None


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.

    Returns:
        Settings instance with values from environment
    """
    return Settings()


def get_ringba_environment() -> RingbaEnvironment:
    """FastAPI dependency returning a fresh read of the Ringba credentials."""
    return RingbaEnvironment()


# Global settings instance
settings = get_settings()
