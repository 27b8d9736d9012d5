"""Exception hierarchy for webhook_chat.

Expected outcomes of a turn (HTTP errors, unreadable payloads, remote
errors) are values, see `webhook_chat.core.types`. Exceptions are reserved
for misconfiguration and network-level breakage.
"""


class WebhookChatError(Exception):
    """Base exception for webhook_chat errors"""  # noqa: D415


class ConfigurationError(WebhookChatError):
    """Raised when configuration is missing or invalid"""  # noqa: D415


class TransportError(WebhookChatError):
    """Raised when the webhook cannot be reached or the exchange breaks off."""

    def __init__(self, message: str, *, url: str | None = None) -> None:
        self.url = url
        super().__init__(message)


class SessionError(WebhookChatError):
    """Raised when a session is driven outside of its contract"""  # noqa: D415
