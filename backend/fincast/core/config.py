"""
config.py — Centralized Application Configuration Loader

Purpose:
- Define a single source of truth for application settings.
- Load and validate environment variables from `.env` or OS environment.

Core Workflow:
1. Host application edits historical inputs and assumptions
2. Engine recomputes projections, forecasts and valuations in-process
3. Snapshots are saved/loaded as opaque JSON blobs through the persistence API

This module does NOT:
- Execute any DB connections.
- Make external API calls.
- Hold modeling policy constants (see services/modeling/constants.py).
"""

from pathlib import Path
from typing import Any, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file relative to backend directory
# config.py is at: backend/fincast/core/config.py
# .env should be at: backend/.env
_CONFIG_DIR = Path(__file__).parent  # backend/fincast/core
_BACKEND_DIR = _CONFIG_DIR.parent.parent  # backend
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    _ENV_FILE_PATH = str(_ENV_FILE.resolve())
else:
    # Fallback: use relative path (pydantic will look in CWD)
    _ENV_FILE_PATH = ".env"


class Settings(BaseSettings):
    """
    Settings container for the fincast backend.
    """
    # Database - persistence of saved snapshots
    DATABASE_URL: str = Field(
        "sqlite:///./fincast.db",
        description="SQLAlchemy connection string (postgresql://... or sqlite:///...)",
    )

    # Logging
    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    # HTTP API
    API_PREFIX: str = Field(
        "/api/v1",
        description="Prefix under which all v1 routers are mounted",
    )
    CORS_ORIGINS: List[str] = Field(
        default_factory=lambda: ["*"],
        description="Allowed CORS origins for the browser client",
    )

    # Persistence client (used by a host application talking to this API)
    API_BASE_URL: str = Field(
        "http://localhost:8000/api/v1",
        description="Base URL the persistence client sends save/load requests to",
    )
    PERSISTENCE_TIMEOUT_SECONDS: float = Field(
        10.0,
        description="HTTP timeout for persistence client requests (seconds)",
    )

    # Modeling
    PROJECTION_YEARS: int = Field(
        5,
        description="Default number of annual projection periods",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Upper-case and strip the log level."""
        if isinstance(v, str):
            return v.strip().upper()
        return v or "INFO"

    @field_validator("PROJECTION_YEARS")
    @classmethod
    def positive_projection_years(cls, v: int) -> int:
        if v < 1:
            raise ValueError("PROJECTION_YEARS must be at least 1")
        return v

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )


# Singleton pattern — settings imported anywhere will reference same object.
settings = Settings()
