"""Review and summary pipeline assembly and execution."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pendulum
import structlog
from pydantic import ValidationError

from .core import (
    FailureCause,
    ReviewGenerator,
    ReviewOutcome,
    SummaryRenderer,
    classify,
)
from .core.result import Ok
from .core.summary import REVIEW_REPORT_LABEL, TEST_REPORT_LABEL
from .schemas import ReviewReport, TestReport, normalize_review

NO_CODE_PLACEHOLDER = "// no code found"


class DocumentReadError(ValueError):
    """Raised when an input document is absent, unreadable or malformed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"Could not read {source}: {reason}")
        self.source = source
        self.reason = reason


def read_json_document(path: Path, source: str) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise DocumentReadError(source, f"file not found ({path})") from exc
    except json.JSONDecodeError as exc:
        raise DocumentReadError(source, f"invalid JSON ({exc})") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(source, f"unreadable file ({exc})") from exc
    if not isinstance(data, dict):
        raise DocumentReadError(source, "document is not a JSON object")
    return data


class TestReportLoader:
    """Load Test Report documents."""

    __test__ = False

    def load(self, path: Path) -> TestReport:
        raw = read_json_document(path, TEST_REPORT_LABEL)
        try:
            return TestReport.model_validate(raw)
        except ValidationError as exc:
            raise DocumentReadError(
                TEST_REPORT_LABEL,
                f"invalid document ({exc.error_count()} validation errors)",
            ) from exc


class ReviewReportLoader:
    """Load Review Report documents, substituting neutral values for bad fields."""

    def __init__(self) -> None:
        self._logger = structlog.get_logger(__name__)

    def load(self, path: Path) -> ReviewReport:
        raw = read_json_document(path, REVIEW_REPORT_LABEL)
        review, substituted = normalize_review(raw)
        if substituted:
            self._logger.warning("review_report.fields_substituted", fields=substituted, path=str(path))
        return review


class OutputWriter:
    """Persist documents atomically: temp file in the target directory, then rename."""

    def write_text(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def write_json(self, path: Path, payload: dict | list[dict]) -> None:
        self.write_text(path, json.dumps(payload, ensure_ascii=False, indent=2) + "\n")


def read_candidate_code(path: Path) -> str:
    """Return the candidate's code, or a placeholder when there is none to read."""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return NO_CODE_PLACEHOLDER
    except OSError as exc:
        structlog.get_logger(__name__).warning("candidate_code.unreadable", path=str(path), error=str(exc))
        return NO_CODE_PLACEHOLDER


class ReviewPipeline:
    """Produce exactly one Review Report document per run."""

    def __init__(self, *, generator: ReviewGenerator, writer: OutputWriter | None = None) -> None:
        self._generator = generator
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(self, *, code_path: Path, output_path: Path) -> ReviewOutcome:
        content = read_candidate_code(code_path)
        outcome = self._generator.generate(content)
        self._write(output_path, outcome.review)
        self._logger.info(
            "review.written",
            path=str(output_path),
            degraded=outcome.degraded,
            cause=outcome.cause.value if outcome.cause else None,
            states=[state.value for state in outcome.trail],
        )
        return outcome

    def write_fallback(self, output_path: Path, cause: FailureCause = FailureCause.UNKNOWN) -> ReviewReport:
        """Overwrite ``output_path`` with the Fallback Review for ``cause``; safe to repeat."""
        review = classify(cause)
        self._write(output_path, review)
        self._logger.warning("review.fallback_written", path=str(output_path), cause=cause.value)
        return review

    def _write(self, path: Path, review: ReviewReport) -> None:
        self._writer.write_json(path, review.model_dump(mode="json"))


@dataclass(slots=True)
class SummaryOutcome:
    """Rendered Summary and whether it is the full report."""

    text: str
    complete: bool
    errors: dict[str, str] = field(default_factory=dict)


class SummaryPipeline:
    """Merge both reports into the Summary document."""

    def __init__(
        self,
        *,
        renderer: SummaryRenderer,
        test_loader: TestReportLoader | None = None,
        review_loader: ReviewReportLoader | None = None,
        writer: OutputWriter | None = None,
    ) -> None:
        self._renderer = renderer
        self._tests = test_loader or TestReportLoader()
        self._reviews = review_loader or ReviewReportLoader()
        self._writer = writer or OutputWriter()
        self._logger = structlog.get_logger(__name__)

    def run(
        self,
        *,
        test_report_path: Path,
        review_path: Path,
        output_path: Path,
        generated_at: pendulum.DateTime | None = None,
    ) -> SummaryOutcome:
        errors: dict[str, str] = {}
        tests = self._load(self._tests.load, test_report_path, TEST_REPORT_LABEL, errors)
        review = self._load(self._reviews.load, review_path, REVIEW_REPORT_LABEL, errors)

        if tests is not None and review is not None:
            rendered = self._renderer.try_render(tests, review, generated_at=generated_at)
            if isinstance(rendered, Ok):
                self._writer.write_text(output_path, rendered.value)
                self._logger.info(
                    "summary.written",
                    path=str(output_path),
                    tests_passed=tests.totals.all_passed,
                    recommendation=review.recommendation,
                )
                return SummaryOutcome(text=rendered.value, complete=True)
            errors["render"] = rendered.error

        return self.write_minimal(output_path=output_path, errors=errors, generated_at=generated_at)

    def write_minimal(
        self,
        *,
        output_path: Path,
        errors: dict[str, str],
        generated_at: pendulum.DateTime | None = None,
    ) -> SummaryOutcome:
        """Overwrite ``output_path`` with the minimal Summary describing ``errors``."""
        text = self._renderer.render_minimal(
            test_error=errors.get(TEST_REPORT_LABEL),
            review_error=errors.get(REVIEW_REPORT_LABEL),
            render_error=errors.get("render"),
            config_error=errors.get("config"),
            generated_at=generated_at,
        )
        self._writer.write_text(output_path, text)
        self._logger.error("summary.minimal_written", path=str(output_path), errors=errors)
        return SummaryOutcome(text=text, complete=False, errors=errors)

    def _load(self, loader, path: Path, source: str, errors: dict[str, str]):
        try:
            return loader(path)
        except DocumentReadError as exc:
            errors[source] = exc.reason
        except Exception as exc:  # noqa: BLE001
            errors[source] = f"{type(exc).__name__}: {exc}"
        self._logger.warning("summary.input_unreadable", source=source, path=str(path), reason=errors[source])
        return None
