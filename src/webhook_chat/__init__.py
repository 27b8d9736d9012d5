"""Conversation client for remote chat webhooks.

Typical use:

    from webhook_chat import ChatSession, WebhookTransport, resolve_config

    config = resolve_config({"webhook_url": "https://example.com/chat"})
    async with WebhookTransport.from_config(config) as transport:
        session = ChatSession.from_config(transport, config)
        reply = await session.ask("Hello")
"""

import importlib.metadata
import logging

from webhook_chat.config import ResolvedConfig, resolve_config
from webhook_chat.core.exceptions import (
    ConfigurationError,
    SessionError,
    TransportError,
    WebhookChatError,
)
from webhook_chat.core.types import (
    ChatRequest,
    Failure,
    Message,
    NormalizedOutcome,
    SessionPhase,
    SessionState,
    Text,
    TransportHttpError,
    TransportOk,
    TransportResult,
)
from webhook_chat.response import (
    NO_RESPONSE_TEXT,
    ExtractionRule,
    ResponseNormalizer,
    default_rules,
    normalize_response,
)
from webhook_chat.session import ChatSession
from webhook_chat.telemetry import (
    ChatMetric,
    MemoryReporter,
    TelemetryContext,
    TelemetryReporter,
)
from webhook_chat.transport import Transport, WebhookTransport

try:
    __version__ = importlib.metadata.version("webhook-chat")
except importlib.metadata.PackageNotFoundError:
    __version__ = "development"

# Set up a null handler for the library's root logger.
# This prevents 'No handler found' errors if the consuming app has no logging configured.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Session
    "ChatSession",
    "SessionState",
    "SessionPhase",
    "Message",
    # Transport
    "Transport",
    "WebhookTransport",
    "ChatRequest",
    "TransportOk",
    "TransportHttpError",
    "TransportResult",
    # Normalization
    "ResponseNormalizer",
    "ExtractionRule",
    "default_rules",
    "normalize_response",
    "NormalizedOutcome",
    "Text",
    "Failure",
    "NO_RESPONSE_TEXT",
    # Configuration
    "ResolvedConfig",
    "resolve_config",
    # Telemetry
    "ChatMetric",
    "MemoryReporter",
    "TelemetryContext",
    "TelemetryReporter",
    # Exceptions
    "WebhookChatError",
    "ConfigurationError",
    "TransportError",
    "SessionError",
]
