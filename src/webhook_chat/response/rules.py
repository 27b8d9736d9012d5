"""The default, ordered extraction rule table.

Webhook backends disagree about where the reply lives. The table below
lists the places we look, highest precedence first. `error` comes before
everything else so that a payload reporting an error is never displayed.
"""

from __future__ import annotations

from collections.abc import Mapping

from webhook_chat.core.types import Failure, NormalizedOutcome, Text

from .extraction import ExtractionRule, Payload, display_text, is_present

# Top-level fields whose value is the reply itself, in precedence order.
DIRECT_FIELDS: tuple[str, ...] = ("response", "message", "output", "text", "content")

# Fields looked up inside an object-valued `data` wrapper.
NESTED_DATA_FIELDS: tuple[str, ...] = ("response", "message")


def _error_outcome(payload: Payload) -> NormalizedOutcome:
    error = payload["error"]
    if isinstance(error, Mapping) and error.get("content") is not None:
        detail = display_text(error["content"])
    else:
        detail = display_text(error)
    return Failure(f"Webhook error: {detail}")


def _field_rule(key: str) -> ExtractionRule:
    return ExtractionRule(
        name=key,
        matcher=lambda payload: is_present(payload, key),
        extractor=lambda payload: Text(display_text(payload[key])),
    )


def _data_matches(payload: Payload) -> bool:
    data = payload.get("data")
    if isinstance(data, str):
        return True
    return isinstance(data, Mapping) and any(
        is_present(data, key) for key in NESTED_DATA_FIELDS
    )


def _data_outcome(payload: Payload) -> NormalizedOutcome:
    data = payload["data"]
    if isinstance(data, str):
        return Text(data)
    for key in NESTED_DATA_FIELDS:
        if is_present(data, key):
            return Text(display_text(data[key]))
    # Unreachable when guarded by _data_matches
    raise LookupError("data carries no recognized nested field")


def default_rules() -> tuple[ExtractionRule, ...]:
    """Return the built-in rules in evaluation order."""
    return (
        ExtractionRule(
            name="error",
            matcher=lambda payload: is_present(payload, "error"),
            extractor=_error_outcome,
        ),
        *(_field_rule(key) for key in DIRECT_FIELDS),
        ExtractionRule(name="data", matcher=_data_matches, extractor=_data_outcome),
    )
