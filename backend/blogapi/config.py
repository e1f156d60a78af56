"""
Blog API Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the store adapter and middleware.
When:  Loaded once at module import time.
"""

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for a local MongoDB on the default port.
    Attributes are grouped by concern.
    """

    # ── Document Store ────────────────────────────────────────────────────
    # Format: mongodb://[user:password@]host[:port][/?options]
    mongo_uri: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI",
    )
    mongo_database: str = Field(default="blog", min_length=1)
    mongo_collection: str = Field(default="posts", min_length=1)

    # Bounds the startup connect only; CRUD calls carry no deadline.
    mongo_connect_timeout: float = Field(default=10.0, gt=0, le=120)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Sent verbatim as Access-Control-Allow-Origin on every response.
    cors_allow_origin: str = Field(default="*")

    # ── Error Reporting ───────────────────────────────────────────────────
    # When False, store failures answer with a generic message and the driver
    # text only reaches the logs.
    expose_store_errors: bool = Field(default=True)

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    backend_port: int = Field(default=8080, ge=1024, le=65535)

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

    @field_validator("mongo_uri")
    @classmethod
    def validate_mongo_uri(cls, v: str) -> str:
        """Rejects URIs the driver would refuse anyway, with a clearer message."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError(
                f"Invalid mongo_uri '{v}'. Must start with mongodb:// or mongodb+srv://"
            )
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # MONGO_URI and mongo_uri both work
    }


# Singleton instance, imported throughout the application
settings = Settings()
