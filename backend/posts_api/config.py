"""
Posts API — Application Configuration
======================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
       Fails fast if the database credentials are missing.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and exposes a cached `get_settings()` accessor.
Who:   Read by the application factory and the database adapter.
When:  Constructed once when the application is created.

Required variables:
    DATABASE_URL  SQLAlchemy URL of the hosted PostgreSQL database
                  e.g. postgresql+asyncpg://postgres@db.example.supabase.co:5432/postgres
    DATABASE_KEY  Access key for that database (applied as the connection password)

    If either is absent, constructing Settings raises and the process refuses
    to start. There is deliberately no default for either.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    database_url: str = Field(description="SQLAlchemy URL of the hosted database")
    database_key: str = Field(description="Access key for the hosted database")

    # Pool knobs forwarded to the SDK; ignored for SQLite (tests)
    db_pool_size: int = Field(default=5, ge=1, le=100)
    db_max_overflow: int = Field(default=10, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Fixed allow-list: local dev servers (Vite, CRA) and the production frontend
    cors_origins: str = Field(
        default="http://localhost:5173,http://localhost:3000,https://week-6-frontend.vercel.app"
    )
    frontend_url: Optional[str] = Field(default=None)

    @property
    def cors_origins_list(self) -> List[str]:
        """Fixed origins plus FRONTEND_URL, empty entries dropped."""
        origins = [origin.strip() for origin in self.cors_origins.split(",")]
        if self.frontend_url:
            origins.append(self.frontend_url.strip())
        return [origin for origin in origins if origin]

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)
    environment: str = Field(default="development")

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @field_validator("database_url", "database_key")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """An empty DATABASE_URL/DATABASE_KEY counts as missing."""
        if not v or not v.strip():
            raise ValueError("must be set to a non-empty value")
        return v.strip()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,  # DATABASE_URL and database_url both work
        extra="ignore",
    )


REQUIRED_ENV_VARS = ("DATABASE_URL", "DATABASE_KEY")


class ConfigurationError(RuntimeError):
    """Startup cannot continue: required settings are missing or invalid."""


@lru_cache
def get_settings() -> Settings:
    """
    Load settings once per process.

    Raises:
        ConfigurationError: DATABASE_URL or DATABASE_KEY is missing/blank,
                            or another setting failed validation.
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]).upper()
            problems.append(f"{field}: {error['msg']}")
        raise ConfigurationError(
            "Invalid configuration (required: "
            + " and ".join(REQUIRED_ENV_VARS)
            + ")\n"
            + "\n".join(f"  - {p}" for p in problems)
        ) from e
