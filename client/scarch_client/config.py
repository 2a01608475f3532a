"""
Scarch Client — Configuration
===============================

What:  Centralized configuration using Pydantic Settings.
How:   Values come from environment variables (or a .env file), are validated
       on load, and are exposed through the `settings` singleton.
Who:   Imported by the transport, token store, services and logging setup.
When:  Loaded once at import time.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Client settings loaded from environment variables.

    The base origin is configured once; every path the prefix resolver
    produces is appended to it.
    """

    # ── Backend ───────────────────────────────────────────────────────────
    # Origin only, no path prefix: the prefix is discovered at runtime.
    api_url: str = Field(
        default="https://api.scarch.cloud",
        description="Base origin URL of the Scarch backend",
    )

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Removes trailing slashes so `api_url + path` never doubles them."""
        cleaned = v.strip().rstrip("/")
        if not cleaned:
            raise ValueError("api_url must not be empty")
        return cleaned

    # ── Timeouts (seconds) ────────────────────────────────────────────────
    # Large multipart payloads and AI calls get longer deadlines.
    request_timeout: float = Field(default=30.0, gt=0)
    template_upload_timeout: float = Field(default=60.0, gt=0)
    ocr_upload_timeout: float = Field(default=60.0, gt=0)
    upload_timeout: float = Field(default=120.0, gt=0)
    ai_prefill_timeout: float = Field(default=180.0, gt=0)

    # ── Auth ──────────────────────────────────────────────────────────────
    token_file: str = Field(
        default="~/.scarch/token",
        description="Where FileTokenStore keeps the bearer token",
    )

    # ── Uploads ───────────────────────────────────────────────────────────
    # Multi-page template uploads are truncated to this many files.
    max_upload_files: int = Field(default=20, ge=1, le=100)

    # ── Logging ───────────────────────────────────────────────────────────
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

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


settings = Settings()
