"""Response normalizer: raw webhook result -> displayable text or failure.

The normalizer is pure and total. It never raises: a non-success status,
a payload that reports an error, or anything unexpected becomes a
`Failure`; everything else becomes `Text`, falling back to
`NO_RESPONSE_TEXT` when nothing usable is found.
"""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from typing import Any

from webhook_chat.core.types import (
    Failure,
    NormalizedOutcome,
    Text,
    TransportHttpError,
    TransportOk,
    TransportResult,
)

from .extraction import ExtractionRule, NormalizationDiagnostics, PayloadKind
from .rules import default_rules

log = logging.getLogger(__name__)

NO_RESPONSE_TEXT = "No response received"

_PREVIEW_CHARS = 200


class _UnparsableError(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON; treat such bodies as plain text.
    raise _UnparsableError(f"non-standard JSON constant {name}")


def _parse(body_text: str) -> Any:
    return json.loads(body_text, parse_constant=_reject_constant)


class ResponseNormalizer:
    """Maps transport results to `Text` or `Failure` with a fixed rule order.

    Attributes:
        rules: Extraction rules, evaluated first to last.
    """

    def __init__(self, rules: tuple[ExtractionRule, ...] | None = None) -> None:
        """Initialize the normalizer.

        Args:
            rules: Optional rule table. Defaults to `default_rules()`.
        """
        self.rules = rules if rules is not None else default_rules()

    def normalize(self, result: TransportResult) -> NormalizedOutcome:
        """Return the outcome for a transport result."""
        outcome, _ = self.inspect(result)
        return outcome

    def inspect(
        self, result: TransportResult
    ) -> tuple[NormalizedOutcome, NormalizationDiagnostics]:
        """Return the outcome together with the diagnostics that led to it."""
        diagnostics = NormalizationDiagnostics()
        try:
            outcome = self._normalize(result, diagnostics)
        except Exception as e:
            log.error("Response normalization failed unexpectedly: %s", e, exc_info=True)
            diagnostics.kind = PayloadKind.UNEXPECTED_EXCEPTION
            outcome = Failure(f"Unexpected normalization error: {e}")
        return outcome, diagnostics

    def _normalize(
        self, result: TransportResult, diagnostics: NormalizationDiagnostics
    ) -> NormalizedOutcome:
        if isinstance(result, TransportHttpError):
            diagnostics.kind = PayloadKind.TRANSPORT_FAILURE
            diagnostics.status_code = result.status_code
            return Failure(f"HTTP error! status: {result.status_code}")

        if not isinstance(result, TransportOk):
            raise TypeError(f"Unsupported transport result: {type(result).__name__}")

        body = result.body_text
        diagnostics.body_preview = body[:_PREVIEW_CHARS]
        log.debug("Raw webhook response: %s", diagnostics.body_preview)

        try:
            document = _parse(body)
        except (ValueError, RecursionError):
            # json.JSONDecodeError and _UnparsableError are both ValueErrors
            log.debug("Webhook response is not JSON, using raw text")
            diagnostics.kind = PayloadKind.UNPARSABLE_PAYLOAD
            return Text(body) if body.strip() else Text(NO_RESPONSE_TEXT)

        if isinstance(document, Mapping):
            for rule in self.rules:
                diagnostics.attempted_rules.append(rule.name)
                if not rule.matcher(document):
                    continue
                try:
                    outcome = rule.extractor(document)
                except Exception as e:
                    diagnostics.rule_errors[rule.name] = str(e)
                    continue  # Try next rule
                diagnostics.matched_rule = rule.name
                diagnostics.kind = (
                    PayloadKind.REMOTE_REPORTED_ERROR
                    if isinstance(outcome, Failure)
                    else PayloadKind.EXTRACTED
                )
                return outcome

        diagnostics.kind = PayloadKind.NO_RECOGNIZED_FIELD
        return Text(NO_RESPONSE_TEXT)


_DEFAULT_NORMALIZER = ResponseNormalizer()


def normalize_response(result: TransportResult) -> NormalizedOutcome:
    """Normalize with the default rule table."""
    return _DEFAULT_NORMALIZER.normalize(result)
