"""Core data types that flow between the session, transport and normalizer.

Everything here is immutable. The session owns the only mutable state and
hands out `SessionState` snapshots; transports and the normalizer exchange
small tagged values instead of raising for expected outcomes.
"""

from __future__ import annotations

import dataclasses
import enum
import typing

# --- Minimal guard helpers (clarity > boilerplate) ---


def _require(
    *,
    condition: bool,
    message: str,
    exc: type[Exception] = ValueError,
    field_name: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if not condition:
        if field_name:
            raise exc(f"{field_name}: {message}")
        raise exc(message)


def _is_tuple_of(value: object, typ: type | tuple[type, ...]) -> bool:
    return isinstance(value, tuple) and all(isinstance(v, typ) for v in value)


# --- Conversation entries ---

type Role = typing.Literal["user", "assistant"]

_ROLES: frozenset[str] = frozenset({"user", "assistant"})


@dataclasses.dataclass(frozen=True, slots=True)
class Message:
    """A single entry of the conversation transcript."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        """Validate invariants for type safety."""
        _require(
            condition=self.role in _ROLES,
            message=f"must be one of {sorted(_ROLES)}, got {self.role!r}",
            field_name="role",
        )
        _require(
            condition=isinstance(self.content, str),
            message="must be str",
            field_name="content",
            exc=TypeError,
        )

    @classmethod
    def user(cls, content: str) -> Message:
        return cls(role="user", content=content)

    @classmethod
    def assistant(cls, content: str) -> Message:
        return cls(role="assistant", content=content)

    def to_dict(self) -> dict[str, str]:
        """Wire form used as conversation history."""
        return {"role": self.role, "content": self.content}


class SessionPhase(enum.StrEnum):
    """The two states of a chat session."""

    IDLE = "idle"
    AWAITING_REPLY = "awaiting_reply"


@dataclasses.dataclass(frozen=True, slots=True)
class SessionState:
    """Immutable snapshot of a chat session for rendering."""

    history: tuple[Message, ...] = ()
    pending: bool = False
    draft: str = ""

    def __post_init__(self) -> None:
        _require(
            condition=_is_tuple_of(self.history, Message),
            message="must be a tuple[Message, ...]",
            field_name="history",
            exc=TypeError,
        )

    @property
    def phase(self) -> SessionPhase:
        return SessionPhase.AWAITING_REPLY if self.pending else SessionPhase.IDLE

    @property
    def last(self) -> Message | None:
        return self.history[-1] if self.history else None


# --- Transport contract ---


@dataclasses.dataclass(frozen=True, slots=True)
class ChatRequest:
    """One outbound call: the new user message plus the prior transcript.

    `history` never contains `message` itself; it is the transcript as it
    stood before the user entry for this turn was appended.
    """

    message: str
    history: tuple[Message, ...] = ()

    def __post_init__(self) -> None:
        _require(
            condition=isinstance(self.message, str) and self.message.strip() != "",
            message="must be a non-empty string",
            field_name="message",
        )
        _require(
            condition=_is_tuple_of(self.history, Message),
            message="must be a tuple[Message, ...]",
            field_name="history",
            exc=TypeError,
        )

    def history_payload(self) -> list[dict[str, str]]:
        return [m.to_dict() for m in self.history]


@dataclasses.dataclass(frozen=True, slots=True)
class TransportOk:
    """The remote endpoint answered with a success status."""

    body_text: str


@dataclasses.dataclass(frozen=True, slots=True)
class TransportHttpError:
    """The remote endpoint answered with a non-success status."""

    status_code: int


type TransportResult = TransportOk | TransportHttpError

# --- Normalized outcome ---
# A tiny tagged result, in the spirit of Success/Failure: expected failures
# are values, not exceptions.


@dataclasses.dataclass(frozen=True, slots=True)
class Text:
    """Displayable reply text extracted from a payload."""

    value: str


@dataclasses.dataclass(frozen=True, slots=True)
class Failure:
    """The call failed; `reason` is diagnostic detail, never shown to users."""

    reason: str


type NormalizedOutcome = Text | Failure
