"""Core review fallback and summary rendering components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .fallback import (
    FALLBACK_MESSAGES,
    GENERIC_FALLBACK_MESSAGE,
    FailureCause,
    build_fallback_review,
    classify,
    classify_service_error,
)
from .generator import (
    ReviewClient,
    ReviewGenerator,
    ReviewOutcome,
    ReviewState,
    parse_review_response,
)
from .result import Err, Ok, Result
from .summary import SummaryRenderer

__all__ = [
    "FALLBACK_MESSAGES",
    "GENERIC_FALLBACK_MESSAGE",
    "Err",
    "FailureCause",
    "Ok",
    "Result",
    "ReviewClient",
    "ReviewGenerator",
    "ReviewOutcome",
    "ReviewState",
    "SummaryRenderer",
    "build_fallback_review",
    "classify",
    "classify_service_error",
    "parse_review_response",
]
