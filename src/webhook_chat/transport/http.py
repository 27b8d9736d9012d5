"""HTTP transport that posts chat turns to a webhook with httpx."""

from __future__ import annotations

import logging
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

import httpx

from webhook_chat.core.exceptions import ConfigurationError, TransportError
from webhook_chat.core.types import (
    ChatRequest,
    TransportHttpError,
    TransportOk,
    TransportResult,
)

if TYPE_CHECKING:
    from webhook_chat.config import ResolvedConfig

log = logging.getLogger(__name__)


class WebhookTransport:
    """Posts ``{chatInput, chatHistory}`` JSON to a webhook URL.

    Redirects are followed. The transport does not retry and, unless a
    timeout is configured, waits for the webhook indefinitely. A client
    passed in by the caller is left open on `aclose()`; a client created
    here is closed.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: float | None = None,
        message_field: str = "chatInput",
        history_field: str = "chatHistory",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not url:
            raise ConfigurationError("WebhookTransport requires a webhook URL")
        self.url = url
        self.message_field = message_field
        self.history_field = history_field
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds)
        )

    @classmethod
    def from_config(
        cls, config: ResolvedConfig, *, client: httpx.AsyncClient | None = None
    ) -> WebhookTransport:
        """Build a transport from resolved configuration."""
        if not config.webhook_url:
            raise ConfigurationError(
                "No webhook URL configured. Set WEBHOOK_CHAT_WEBHOOK_URL, "
                "[tool.webhook_chat] webhook_url, or pass it programmatically."
            )
        return cls(
            config.webhook_url,
            timeout_seconds=config.timeout_seconds,
            message_field=config.message_field,
            history_field=config.history_field,
            client=client,
        )

    def build_payload(self, request: ChatRequest) -> dict[str, Any]:
        return {
            self.message_field: request.message,
            self.history_field: request.history_payload(),
        }

    async def __call__(self, request: ChatRequest) -> TransportResult:
        try:
            response = await self._client.post(
                self.url,
                json=self.build_payload(request),
                headers={"Content-Type": "application/json"},
                follow_redirects=True,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Webhook request timeout: {self.url}", url=self.url) from e
        except httpx.HTTPError as e:
            raise TransportError(
                f"Failed to reach webhook {self.url}: {e}", url=self.url
            ) from e

        if not response.is_success:
            log.debug("Webhook answered with status %s", response.status_code)
            return TransportHttpError(status_code=response.status_code)

        body = response.text
        log.debug("Webhook answered %d characters", len(body))
        return TransportOk(body_text=body)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()
