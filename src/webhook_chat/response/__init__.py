"""Response normalization for webhook replies of unknown shape."""

from .extraction import (
    ExtractionRule,
    NormalizationDiagnostics,
    PayloadKind,
)
from .normalizer import NO_RESPONSE_TEXT, ResponseNormalizer, normalize_response
from .rules import default_rules

__all__ = [
    "NO_RESPONSE_TEXT",
    "ExtractionRule",
    "NormalizationDiagnostics",
    "PayloadKind",
    "ResponseNormalizer",
    "default_rules",
    "normalize_response",
]
