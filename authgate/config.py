"""
Configuration module for the Google sign-in service.

This module uses Pydantic Settings to load and validate environment variables
for Google token verification, session JWT signing, persistence, and
server/CORS settings.

Environment variables are loaded from .env file or system environment. The
resulting Settings object is built once at startup and handed to the
components that need it; nothing below reads the environment on its own.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # =========================================================================
    # Google Identity Configuration
    # =========================================================================

    GOOGLE_CLIENT_ID: str = Field(
        ...,
        description="Google OAuth client ID; the expected audience of ID tokens",
        min_length=1,
    )

    GOOGLE_USERINFO_URL: str = Field(
        default="https://www.googleapis.com/oauth2/v3/userinfo",
        description="Google user-info endpoint used to verify access tokens",
    )

    GOOGLE_JWKS_URL: str = Field(
        default="https://www.googleapis.com/oauth2/v3/certs",
        description="Google JWKS endpoint publishing ID token signing keys",
    )

    GOOGLE_HTTP_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="Timeout for every outbound call to Google",
        gt=0,
        le=60,
    )

    JWKS_CACHE_SECONDS: int = Field(
        default=3600,
        description="Time to cache Google signing keys in seconds",
        ge=60,
        le=86400,
    )

    # =========================================================================
    # Session JWT Configuration
    # =========================================================================

    SESSION_JWT_SECRET: str = Field(
        ...,
        description="Secret key for signing session JWTs (must be cryptographically secure)",
        min_length=32,
    )

    SESSION_JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm (HS256, HS384, or HS512)",
    )

    SESSION_JWT_ISSUER: str = Field(
        default="authgate",
        description="Value of the 'iss' claim on issued session JWTs",
    )

    # =========================================================================
    # Persistence
    # =========================================================================

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./authgate.db",
        description="SQLAlchemy async database URL for the user store",
    )

    # =========================================================================
    # Server Configuration
    # =========================================================================

    API_PREFIX: str = Field(
        default="",
        description="Optional prefix for all API routes (e.g. /api/v1)",
    )

    HOST: str = Field(default="0.0.0.0", description="Host to bind the server")

    PORT: int = Field(default=8080, description="Port to bind the server", ge=1, le=65535)

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (leave empty for no CORS)",
    )

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into a list, empty when not configured."""
        if not self.ALLOWED_ORIGINS:
            return []

        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("SESSION_JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """
        Validate JWT algorithm is one of the supported HMAC algorithms.

        Raises:
            ValueError: If algorithm is not supported
        """
        allowed_algorithms = ["HS256", "HS384", "HS512"]

        if v not in allowed_algorithms:
            raise ValueError(
                f"JWT algorithm must be one of {allowed_algorithms}, got: {v}"
            )

        return v

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            raise ValueError(f"API_PREFIX must start with '/', got: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    Cached so the environment is read only once per process.

    Raises:
        ValidationError: If required environment variables are missing
                        or invalid.
    """
    return Settings()


def validate_configuration(settings: Settings) -> dict:
    """
    Check settings that pass validation but are risky in production.

    Called during application startup; warnings are logged, not raised.
    """
    warnings = []

    if settings.DATABASE_URL.startswith("sqlite"):
        warnings.append("DATABASE_URL points to SQLite (not suitable for multiple workers)")

    if "*" in settings.allowed_origins_list:
        warnings.append("ALLOWED_ORIGINS contains '*' (any origin may call the API)")

    if settings.GOOGLE_USERINFO_URL.startswith("http://") or settings.GOOGLE_JWKS_URL.startswith("http://"):
        warnings.append("Google endpoints are configured without TLS")

    return {
        "warnings": warnings,
    }
