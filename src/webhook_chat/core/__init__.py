"""Core types and exceptions shared by every webhook_chat component."""

from .exceptions import (
    ConfigurationError,
    SessionError,
    TransportError,
    WebhookChatError,
)
from .types import (
    ChatRequest,
    Failure,
    Message,
    NormalizedOutcome,
    Role,
    SessionPhase,
    SessionState,
    Text,
    TransportHttpError,
    TransportOk,
    TransportResult,
)

__all__ = [
    "ChatRequest",
    "ConfigurationError",
    "Failure",
    "Message",
    "NormalizedOutcome",
    "Role",
    "SessionError",
    "SessionPhase",
    "SessionState",
    "Text",
    "TransportError",
    "TransportHttpError",
    "TransportOk",
    "TransportResult",
    "WebhookChatError",
]
