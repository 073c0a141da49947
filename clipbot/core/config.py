"""Clip bot configuration"""

import logging
from functools import lru_cache
from pathlib import Path

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

PROJECT_DIR = Path(__file__).parent.parent.parent

BOT_SCOPES = [
    "clips:edit",  # Create clips
    "user:read:chat",  # Read chat messages
    "user:write:chat",  # Send chat messages
    "user:bot",  # Bot identifier
]


class ClipBotSettings(BaseSettings):
    """Clip bot settings"""

    model_config = SettingsConfigDict(
        env_file=PROJECT_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Chat
    channel: str = Field(..., description="Channel to join")
    username: str = Field(..., description="Bot account login")

    # Twitch OAuth
    client_id: str = Field(..., description="Twitch OAuth Client ID")
    client_secret: str = Field(..., description="Twitch OAuth Client Secret")
    authorization_code: str = Field(..., description="Authorization code from the OAuth redirect")
    token_endpoint: str = Field(..., description="Twitch OAuth token endpoint")

    # Twitch API
    helix_url: str = Field(default="https://api.twitch.tv/helix", description="Helix API base URL")
    redirect_uri: str = Field(default="http://localhost", description="Registered OAuth redirect URI")
    request_timeout: float = Field(default=10.0, gt=0, description="Per-request timeout in seconds")

    # Health server (0 disables it)
    health_port: int = Field(default=0, ge=0, description="Health check server port")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator(
        "channel",
        "username",
        "client_id",
        "client_secret",
        "authorization_code",
        "token_endpoint",
    )
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        """Reject empty or whitespace-only values"""
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("channel")
    @classmethod
    def normalize_channel(cls, v: str) -> str:
        """Strip a leading '#' and lower-case the channel name"""
        v = v.lstrip("#").lower()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("token_endpoint", "helix_url")
    @classmethod
    def validate_http_url(cls, v: str) -> str:
        """Validate the value is an absolute http(s) URL"""
        try:
            url = httpx.URL(v)
        except httpx.InvalidURL as e:
            raise ValueError(f"invalid URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("must be an absolute http(s) URL")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


@lru_cache
def get_settings() -> ClipBotSettings:
    """Get cached settings instance"""
    return ClipBotSettings()  # type: ignore[call-arg]
