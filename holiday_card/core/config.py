from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[2]

DEFAULT_UPLOAD_DIR = BASE_DIR / "uploads"
DEFAULT_STYLE_TRANSFER_BASE_URL = "https://api-inference.huggingface.co/models"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Values shipped in example .env files; treated the same as "no token".
PLACEHOLDER_TOKENS = frozenset(
    {
        "your_huggingface_token_here",
        "your_hf_token_here",
        "your_api_key_here",
        "your-api-key",
        "changeme",
        "hf_xxx",
    }
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Holiday Card Generator"
    description: str = "Turns an uploaded photo into a framed holiday greeting card"
    version: str = "1.0.0"

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=3000, alias="PORT", ge=1, le=65535)
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Comma separated ("http://a.test,http://b.test") or a JSON list
    allowed_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["*"], alias="ALLOWED_ORIGINS"
    )

    # Uploads are staged here for the lifetime of a single request
    upload_dir: Path = Field(default=DEFAULT_UPLOAD_DIR, alias="UPLOAD_DIR")
    max_upload_bytes: int = Field(
        default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES", ge=1,
        description="Maximum accepted upload size in bytes. Default: 10MB."
    )

    # External style transfer (festive sweater effect for christmas cards)
    huggingface_api_token: Optional[str] = Field(default=None, alias="HUGGINGFACE_API_TOKEN")
    style_transfer_base_url: str = Field(
        default=DEFAULT_STYLE_TRANSFER_BASE_URL, alias="STYLE_TRANSFER_BASE_URL"
    )
    style_transfer_timeout_seconds: float = Field(
        default=60.0, alias="STYLE_TRANSFER_TIMEOUT_SECONDS", gt=0, le=600,
        description="Per-request timeout for each candidate model call."
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize and validate log level name."""
        if not value:
            return "INFO"
        normalized = value.strip().upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL '{value}'. "
                "Valid options: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return normalized

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> Any:
        """Accept a comma separated string or a JSON list of origins."""
        if not isinstance(value, str):
            return value
        stripped = value.strip()
        if not stripped:
            return ["*"]
        if stripped.startswith("["):
            return json.loads(stripped)
        return [origin.strip() for origin in stripped.split(",") if origin.strip()]

    @property
    def style_transfer_enabled(self) -> bool:
        """True when a real (non-placeholder) inference token is configured."""
        token = (self.huggingface_api_token or "").strip()
        if not token:
            return False
        return token.lower() not in PLACEHOLDER_TOKENS


settings = Settings()
