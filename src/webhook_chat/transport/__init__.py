"""Transports carry one chat turn to the remote webhook."""

from .base import Transport
from .http import WebhookTransport

__all__ = ["Transport", "WebhookTransport"]
