"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from various sources (environment, files, programmatic) into the correct
types with proper defaults.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ERROR_MESSAGE = "Error: Failed to get response from the server."


class ChatSettings(BaseSettings):
    """Pydantic settings schema for the webhook chat client.

    Integrates with environment variables using the WEBHOOK_CHAT_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBHOOK_CHAT_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown env vars for forward compatibility
    )

    webhook_url: str | None = Field(
        default=None,
        description="URL of the conversational webhook (POST endpoint)",
    )

    timeout_seconds: float | None = Field(
        default=None,
        description="HTTP timeout in seconds; unset waits for the reply indefinitely",
        gt=0,
    )

    message_field: str = Field(
        default="chatInput",
        description="JSON field carrying the new user message",
        min_length=1,
    )

    history_field: str = Field(
        default="chatHistory",
        description="JSON field carrying the prior conversation",
        min_length=1,
    )

    error_message: str = Field(
        default=DEFAULT_ERROR_MESSAGE,
        description="Assistant text shown when a turn fails",
        min_length=1,
    )

    @field_validator("webhook_url", mode="before")
    @classmethod
    def validate_webhook_url(cls, v: Any) -> str | None:
        """Accept only absolute http(s) URLs; blank means unset."""
        if v is None:
            return None
        if not isinstance(v, str):
            raise ValueError(f"webhook_url must be a string, got {type(v).__name__}")
        v = v.strip()
        if not v:
            return None
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"webhook_url must start with http:// or https://: {v}")
        return v

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def parse_timeout(cls, v: Any) -> Any:
        """Treat blank/"none" strings from env or files as unset."""
        if isinstance(v, str) and v.strip().lower() in {"", "none", "null"}:
            return None
        return v

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary suitable for SourceMap annotation."""
        return {
            "webhook_url": self.webhook_url,
            "timeout_seconds": self.timeout_seconds,
            "message_field": self.message_field,
            "history_field": self.history_field,
            "error_message": self.error_message,
        }
