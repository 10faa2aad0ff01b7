"""Helpers for constructing review requests and the HTTP review client."""

from __future__ import annotations

import json
from typing import Any
from urllib import error, request

import structlog

from .core.result import Err, Ok, Result
from .prompts import REVIEW_TOOL_NAME, SYSTEM_PROMPT, build_user_prompt, review_tool
from .schemas.config import DEFAULT_ENDPOINT, DEFAULT_MODEL


class ReviewServiceError(Exception):
    """Error reported by, or while reaching, the remote review service."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.code = code
        self.timed_out = timed_out


def build_review_payload(
    content: str,
    *,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.2,
    max_tokens: int = 800,
) -> dict[str, Any]:
    """Construct the chat-completion request forcing a ``submit_review`` tool call."""

    return {
        "model": model,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_user_prompt(content)},
        ],
        "tools": [review_tool()],
        "tool_choice": {"type": "function", "function": {"name": REVIEW_TOOL_NAME}},
    }


class HTTPReviewClient:
    """HTTP client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.2,
        max_tokens: int = 800,
        timeout: float = 60.0,
    ):
        self._endpoint = endpoint
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._logger = structlog.get_logger(__name__)

    def request_review(self, content: str, *, api_key: str) -> Result[str, ReviewServiceError]:
        payload = build_review_payload(
            content,
            model=self._model,
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

        req = request.Request(self._endpoint, data=data, headers=headers, method="POST")
        self._logger.info("llm.request", endpoint=self._endpoint, model=self._model, chars=len(content))
        try:
            with request.urlopen(req, timeout=self._timeout) as resp:
                return Ok(resp.read().decode("utf-8"))
        except error.HTTPError as exc:
            return Err(_error_from_http(exc))
        except error.URLError as exc:
            timed_out = isinstance(exc.reason, TimeoutError)
            return Err(ReviewServiceError(str(exc.reason), timed_out=timed_out))
        except TimeoutError as exc:
            return Err(ReviewServiceError(str(exc) or "request timed out", timed_out=True))
        except OSError as exc:
            return Err(ReviewServiceError(str(exc)))


def _error_from_http(exc: error.HTTPError) -> ReviewServiceError:
    try:
        body = exc.read().decode("utf-8", errors="replace")
    except OSError:
        body = ""
    message = exc.reason if isinstance(exc.reason, str) else f"HTTP {exc.code}"
    code: str | None = None
    try:
        details = json.loads(body).get("error") if body else None
    except (json.JSONDecodeError, AttributeError):
        details = None
    if isinstance(details, dict):
        raw_code = details.get("code") or details.get("type")
        code = str(raw_code) if raw_code else None
        message = str(details.get("message") or message)
    return ReviewServiceError(message, status=exc.code, code=code)
