"""Chat session: ordered transcript plus one in-flight turn at a time.

`ChatSession` owns the only mutable chat state. A turn starts with
`submit()`, which records the user message and schedules the webhook call
without blocking; when the call settles, exactly one assistant message is
appended and the session is idle again. Renderers observe immutable
`SessionState` snapshots through `subscribe()`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
from typing import TYPE_CHECKING

from webhook_chat.config.schema import DEFAULT_ERROR_MESSAGE
from webhook_chat.core.exceptions import SessionError
from webhook_chat.core.types import (
    ChatRequest,
    Failure,
    Message,
    NormalizedOutcome,
    SessionState,
    Text,
)
from webhook_chat.response.normalizer import ResponseNormalizer
from webhook_chat.telemetry import ChatMetric, Telemetry, TelemetryContext

if TYPE_CHECKING:
    from webhook_chat.config import ResolvedConfig
    from webhook_chat.transport.base import Transport

log = logging.getLogger(__name__)

type Observer = Callable[[SessionState], None]


class ChatSession:
    """A single conversation with a remote webhook.

    The session has two phases. It is idle until a non-empty `submit()`
    is accepted, then awaits the reply until the transport call settles,
    whatever the outcome. Submissions made while awaiting a reply are
    dropped, not queued.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        normalizer: ResponseNormalizer | None = None,
        telemetry: Telemetry | None = None,
        error_message: str = DEFAULT_ERROR_MESSAGE,
    ) -> None:
        self._transport = transport
        self._normalizer = normalizer or ResponseNormalizer()
        self._telemetry = telemetry or TelemetryContext()
        self._error_message = error_message
        self._history: tuple[Message, ...] = ()
        self._pending = False
        self._draft = ""
        self._observers: list[Observer] = []
        self._inflight: asyncio.Task[Message] | None = None

    @classmethod
    def from_config(
        cls,
        transport: Transport,
        config: ResolvedConfig,
        *,
        telemetry: Telemetry | None = None,
    ) -> ChatSession:
        return cls(transport, telemetry=telemetry, error_message=config.error_message)

    # --- Snapshots and observers ---

    def current_state(self) -> SessionState:
        """Immutable snapshot of history, pending flag and draft."""
        return SessionState(
            history=self._history, pending=self._pending, draft=self._draft
        )

    @property
    def is_busy(self) -> bool:
        return self._pending

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call `observer` with a fresh snapshot after every change.

        Returns:
            A callable that removes the observer again.
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.current_state()
        for observer in tuple(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                log.error(
                    "Session observer '%s' failed: %s",
                    getattr(observer, "__name__", type(observer).__name__),
                    e,
                    exc_info=True,
                )

    # --- Input ---

    def set_draft(self, text: str) -> None:
        """Replace the unsent input."""
        if text == self._draft:
            return
        self._draft = text
        self._notify()

    def submit(self, text: str | None = None) -> asyncio.Task[Message] | None:
        """Start a turn with `text` (or the current draft when omitted).

        Must be called from a running event loop. The call returns
        immediately; await the returned task to wait for the reply.

        Returns:
            The task settling the turn, or None when the submission was
            dropped because the text is blank or a turn is already pending.
        """
        content = (self._draft if text is None else text).strip()
        if not content:
            log.debug("Ignoring blank submission")
            return None
        if self._pending:
            log.debug("Ignoring submission while a reply is pending")
            self._telemetry.count(ChatMetric.SUBMIT_DROPPED)
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise SessionError("submit() requires a running event loop") from e

        # Guard check and state change happen without a suspension point.
        request = ChatRequest(message=content, history=self._history)
        self._history = (*self._history, Message.user(content))
        self._draft = ""
        self._pending = True
        self._notify()

        task = loop.create_task(self._run_turn(request))
        task.add_done_callback(self._on_turn_done)
        self._inflight = task
        return task

    async def ask(self, text: str) -> Message | None:
        """Submit `text` and wait for the assistant reply.

        Returns:
            The appended assistant message, or None if the submission was
            dropped.
        """
        task = self.submit(text)
        if task is None:
            return None
        return await task

    async def wait_idle(self) -> None:
        """Wait until the in-flight turn, if any, has settled."""
        task = self._inflight
        if task is not None and not task.done():
            await asyncio.shield(task)

    # --- Turn execution ---

    async def _run_turn(self, request: ChatRequest) -> Message:
        try:
            history_length = len(request.history)
            with self._telemetry(ChatMetric.TURN, history_length=history_length):
                outcome = await self._exchange(request)
            reply = self._reply_for(outcome)
            self._history = (*self._history, reply)
            self._telemetry.gauge(ChatMetric.HISTORY_LENGTH, len(self._history))
            return reply
        finally:
            self._pending = False
            self._inflight = None
            self._notify()

    def _on_turn_done(self, task: asyncio.Task[Message]) -> None:
        # A task cancelled before it ever ran skips _run_turn's finally block.
        if self._inflight is task:
            self._pending = False
            self._inflight = None
            self._notify()

    async def _exchange(self, request: ChatRequest) -> NormalizedOutcome:
        try:
            result = await self._transport(request)
        except Exception as e:
            log.warning("Chat transport failed: %s", e, exc_info=True)
            return Failure(f"{type(e).__name__}: {e}")

        outcome, diagnostics = self._normalizer.inspect(result)
        log.debug(
            "Normalized webhook reply: kind=%s rule=%s",
            diagnostics.kind,
            diagnostics.matched_rule,
        )
        return outcome

    def _reply_for(self, outcome: NormalizedOutcome) -> Message:
        if isinstance(outcome, Text):
            return Message.assistant(outcome.value)
        log.warning("Chat turn failed: %s", outcome.reason)
        self._telemetry.count(ChatMetric.TURN_FAILED)
        return Message.assistant(self._error_message)
