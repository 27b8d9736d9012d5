"""Extraction building blocks used by the response normalizer.

An `ExtractionRule` pairs a matcher (does this payload carry my field?)
with an extractor (turn it into an outcome). Rules are evaluated in table
order and the first match wins.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
import enum
import json
from typing import Any

from webhook_chat.core.types import NormalizedOutcome

type Payload = Mapping[str, Any]


class PayloadKind(enum.StrEnum):
    """How a transport result was classified during normalization."""

    TRANSPORT_FAILURE = "transport_failure"
    UNPARSABLE_PAYLOAD = "unparsable_payload"
    REMOTE_REPORTED_ERROR = "remote_reported_error"
    NO_RECOGNIZED_FIELD = "no_recognized_field"
    EXTRACTED = "extracted"
    UNEXPECTED_EXCEPTION = "unexpected_exception"


@dataclass(frozen=True)
class ExtractionRule:
    """A named matcher/extractor pair.

    Attributes:
        name: Stable identifier, reported in diagnostics.
        matcher: Returns True when the rule applies to the payload.
        extractor: Produces the outcome; only called after `matcher` matched.
    """

    name: str
    matcher: Callable[[Payload], bool]
    extractor: Callable[[Payload], NormalizedOutcome]

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("ExtractionRule.name must be a non-empty string")
        if not callable(self.matcher) or not callable(self.extractor):
            raise TypeError("ExtractionRule matcher and extractor must be callable")


@dataclass
class NormalizationDiagnostics:
    """What the normalizer tried and why it decided what it did."""

    kind: PayloadKind | None = None
    attempted_rules: list[str] = field(default_factory=list)
    matched_rule: str | None = None
    rule_errors: dict[str, str] = field(default_factory=dict)
    status_code: int | None = None
    body_preview: str = ""


def is_present(payload: Payload, key: str) -> bool:
    """A field is present when the key exists and its value is not null."""
    return payload.get(key) is not None


def display_text(value: Any) -> str:
    """Render a field value for display; non-strings become compact JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
