"""Logging utilities for the reporting commands.

Every event is one JSON object on stdlib ``logging``. Values bound with
:func:`bind_run_context` are merged into each event of the current run, so
the review and summary logs of one CI job can be told apart.
"""

from __future__ import annotations

import logging
import uuid

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog JSON output filtered at ``level``."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(level=log_level, format="%(message)s")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )


def bind_run_context(*, command: str, run_id: str | None = None) -> dict[str, str]:
    """Replace the per-run context with ``command`` and a run id; return it."""
    context = {"command": command, "run_id": run_id or uuid.uuid4().hex[:12]}
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)
    return context
