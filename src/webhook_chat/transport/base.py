"""Base protocol for chat transports."""

from typing import Protocol

from webhook_chat.core.types import ChatRequest, TransportResult


class Transport(Protocol):
    """Protocol for the single network call behind a chat turn.

    A transport performs exactly one request per call. Any async callable
    with this signature qualifies, including plain ``async def`` functions.
    Network-level breakage may be raised; the session turns it into an
    error reply.
    """

    async def __call__(self, request: ChatRequest) -> TransportResult:
        """Send one chat request.

        Args:
            request: The new user message and the prior transcript.

        Returns:
            `TransportOk` with the raw body on a success status, otherwise
            `TransportHttpError` with the status code.
        """
        ...
