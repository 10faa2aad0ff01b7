"""Review Generator: always yields a valid Review Report."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

import structlog
from pydantic import ValidationError

from ..schemas import ReviewReport
from .fallback import FailureCause, classify, classify_service_error
from .result import Err, Ok, Result

RAW_OUTPUT_LOG_LIMIT = 500


class ReviewState(str, Enum):
    NO_CREDENTIALS = "no_credentials"
    REQUESTING = "requesting"
    PARSING = "parsing"
    DEGRADED = "degraded"
    ERROR = "error"
    DONE = "done"


class ReviewClient(Protocol):
    """Remote review service contract."""

    def request_review(self, content: str, *, api_key: str) -> Result[str, Any]:
        """Send one review request; return the raw response body or the service error."""


@dataclass(slots=True)
class ReviewOutcome:
    """Chosen Review Report plus how it was reached."""

    review: ReviewReport
    cause: FailureCause | None = None
    trail: list[ReviewState] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return self.cause is not None


class ReviewGenerator:
    """Run the credential check, remote request and payload validation in order."""

    def __init__(
        self,
        client: ReviewClient,
        *,
        api_key: str | None = None,
        snippet_limit: int = 2000,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._snippet_limit = snippet_limit
        self._logger = structlog.get_logger(__name__)

    def generate(self, content: str) -> ReviewOutcome:
        trail: list[ReviewState] = []

        if not self._api_key:
            trail.append(ReviewState.NO_CREDENTIALS)
            return self._fallback(trail, FailureCause.MISSING_CREDENTIALS)

        trail.append(ReviewState.REQUESTING)
        response = self._client.request_review(
            content[: self._snippet_limit],
            api_key=self._api_key,
        )
        if isinstance(response, Err):
            trail.append(ReviewState.ERROR)
            self._logger.warning(
                "review.service_error",
                status=getattr(response.error, "status", None),
                code=getattr(response.error, "code", None),
                error=str(response.error),
            )
            return self._fallback(trail, classify_service_error(response.error))

        trail.append(ReviewState.PARSING)
        self._logger.debug("review.raw_output", body=response.value[:RAW_OUTPUT_LOG_LIMIT])
        parsed = parse_review_response(response.value)
        if isinstance(parsed, Err):
            trail.append(ReviewState.DEGRADED)
            self._logger.warning("review.invalid_response", reason=parsed.error)
            return self._fallback(trail, FailureCause.INVALID_RESPONSE)

        trail.append(ReviewState.DONE)
        self._logger.info(
            "review.completed",
            overall_score=parsed.value.overall_score,
            recommendation=parsed.value.recommendation,
        )
        return ReviewOutcome(review=parsed.value, trail=trail)

    def _fallback(self, trail: list[ReviewState], cause: FailureCause) -> ReviewOutcome:
        self._logger.warning("review.fallback", cause=cause.value)
        trail.append(ReviewState.DONE)
        return ReviewOutcome(review=classify(cause), cause=cause, trail=trail)


def parse_review_response(body: str) -> Result[ReviewReport, str]:
    """Decode a chat-completion body into a validated ``ReviewReport``.

    The review is read from the first tool call's arguments, falling back to
    the message content when the model answered without a tool call.
    """
    try:
        completion = json.loads(body)
    except json.JSONDecodeError as exc:
        return Err(f"response is not JSON: {exc}")
    if not isinstance(completion, dict):
        return Err("response is not an object")

    choices = completion.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return Err("response has no choices")
    message = choices[0].get("message")
    if not isinstance(message, dict):
        return Err("response choice has no message")

    arguments: Any = None
    tool_calls = message.get("tool_calls")
    if isinstance(tool_calls, list) and tool_calls:
        function = tool_calls[0].get("function") if isinstance(tool_calls[0], dict) else None
        if isinstance(function, dict):
            arguments = function.get("arguments")
    if arguments is None:
        arguments = message.get("content")
    if not isinstance(arguments, str) or not arguments.strip():
        return Err("response carries no review payload")

    try:
        payload = json.loads(arguments)
    except json.JSONDecodeError as exc:
        return Err(f"review payload is not JSON: {exc}")

    try:
        return Ok(ReviewReport.model_validate(payload))
    except ValidationError as exc:
        return Err(f"review payload failed validation ({exc.error_count()} errors)")
