"""Failure classification and Fallback Review construction."""

from __future__ import annotations

from enum import Enum
from typing import Any

from ..schemas import CATEGORY_FIELDS, CategoryScore, ReviewReport
from ..schemas.review import NEUTRAL_RECOMMENDATION, NEUTRAL_SCORE


class FailureCause(str, Enum):
    """Why a genuine review could not be obtained."""

    MISSING_CREDENTIALS = "missing_credentials"
    INVALID_CREDENTIALS = "invalid_credentials"
    QUOTA_EXCEEDED = "quota_exceeded"
    MODEL_UNAVAILABLE = "model_unavailable"
    AUTHENTICATION_FAILED = "authentication_failed"
    INVALID_RESPONSE = "invalid_response"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


GENERIC_FALLBACK_MESSAGE = (
    "AI review could not be completed due to an unexpected error. "
    "Please review the code manually."
)

FALLBACK_MESSAGES: dict[FailureCause, str] = {
    FailureCause.MISSING_CREDENTIALS: (
        "AI review could not be completed: OpenAI API key is missing. "
        "Please configure the OPENAI_API_KEY secret in the repository settings."
    ),
    FailureCause.INVALID_CREDENTIALS: (
        "AI review failed: Invalid OpenAI API key. "
        "Please check that the OPENAI_API_KEY secret is correctly configured."
    ),
    FailureCause.QUOTA_EXCEEDED: (
        "AI review failed: OpenAI API quota exceeded. "
        "Please check your OpenAI account billing."
    ),
    FailureCause.MODEL_UNAVAILABLE: (
        "AI review failed: The requested model is not available. "
        "Please check your OpenAI account permissions."
    ),
    FailureCause.AUTHENTICATION_FAILED: (
        "AI review failed: Authentication error with OpenAI API. "
        "Please verify the API key is valid."
    ),
    FailureCause.INVALID_RESPONSE: (
        "AI review failed: The model response did not match the review format. "
        "Please review the code manually."
    ),
    FailureCause.TIMEOUT: GENERIC_FALLBACK_MESSAGE,
    FailureCause.UNKNOWN: GENERIC_FALLBACK_MESSAGE,
}

NOT_EVALUATED_COMMENT = "Not evaluated: AI review unavailable."

_ERROR_CODE_CAUSES: dict[str, FailureCause] = {
    "invalid_api_key": FailureCause.INVALID_CREDENTIALS,
    "insufficient_quota": FailureCause.QUOTA_EXCEEDED,
    "model_not_found": FailureCause.MODEL_UNAVAILABLE,
}


def classify(cause: FailureCause | None) -> ReviewReport:
    """Return the Fallback Review for ``cause``; unmapped causes get the generic one."""
    message = FALLBACK_MESSAGES.get(cause, GENERIC_FALLBACK_MESSAGE)
    return build_fallback_review(message)


def build_fallback_review(message: str) -> ReviewReport:
    categories = {
        name: CategoryScore(score=NEUTRAL_SCORE, comments=NOT_EVALUATED_COMMENT)
        for name in CATEGORY_FIELDS
    }
    categories["code_quality"] = CategoryScore(score=NEUTRAL_SCORE, comments=message)
    return ReviewReport(
        overall_score=NEUTRAL_SCORE,
        strengths=[],
        improvements=[],
        recommendation=NEUTRAL_RECOMMENDATION,
        **categories,
    )


def classify_service_error(error: Any) -> FailureCause:
    """Map a remote-service error to a ``FailureCause``.

    ``error`` needs ``code``, ``status`` and ``timed_out`` attributes, as on
    ``ReviewServiceError``.
    """
    code = getattr(error, "code", None)
    if code in _ERROR_CODE_CAUSES:
        return _ERROR_CODE_CAUSES[code]
    if getattr(error, "status", None) == 401:
        return FailureCause.AUTHENTICATION_FAILED
    if getattr(error, "timed_out", False):
        return FailureCause.TIMEOUT
    return FailureCause.UNKNOWN
