"""Summary rendering: merges a Test Report and a Review Report into markdown."""

from __future__ import annotations

from dataclasses import dataclass

import pendulum

from .. import __version__
from ..schemas import ReviewReport, SuiteResult, TestReport
from .result import Err, Ok, Result

PASS_GLYPH = "✅"
FAIL_GLYPH = "❌"

TOP_TIER_GLYPH = "🟢"
MIDDLE_TIER_GLYPH = "🟡"
BOTTOM_TIER_GLYPH = "🔴"

RECOMMENDATION_GLYPHS: dict[str, str] = {
    "PASS": "✅",
    "REVIEW": "⚠️",
    "FAIL": "❌",
}
UNKNOWN_RECOMMENDATION_GLYPH = "❓"

NOT_AVAILABLE = "N/A"
MESSAGE_LIMIT = 200

TEST_FILE_SUFFIXES: tuple[str, ...] = (
    ".test.js",
    ".spec.js",
    ".test.jsx",
    ".spec.jsx",
    ".test.mjs",
    ".test.cjs",
    ".test.ts",
    ".spec.ts",
    ".test.tsx",
    ".spec.tsx",
    "_test.py",
    "_test.go",
    "_spec.rb",
)

TEST_REPORT_LABEL = "test report"
REVIEW_REPORT_LABEL = "AI review"


@dataclass(slots=True)
class SuiteRow:
    name: str
    glyph: str
    total: int
    passed: int
    failed: int
    duration: str


def display_name(path: str) -> str:
    """Return the last path segment with a known test-file suffix removed."""
    segment = path.replace("\\", "/").rstrip("/").rsplit("/", 1)[-1]
    for suffix in TEST_FILE_SUFFIXES:
        if segment.endswith(suffix) and len(segment) > len(suffix):
            return segment[: -len(suffix)]
    return segment


def score_tier(score: float) -> str:
    if score >= 8:
        return TOP_TIER_GLYPH
    if score >= 6:
        return MIDDLE_TIER_GLYPH
    return BOTTOM_TIER_GLYPH


def recommendation_glyph(recommendation: str) -> str:
    return RECOMMENDATION_GLYPHS.get(recommendation, UNKNOWN_RECOMMENDATION_GLYPH)


def format_score(score: float) -> str:
    return f"{score:g}"


def suite_row(suite: SuiteResult) -> SuiteRow:
    duration = suite.duration_ms
    return SuiteRow(
        name=display_name(suite.name) or NOT_AVAILABLE,
        glyph=PASS_GLYPH if suite.passed else FAIL_GLYPH,
        total=suite.total_tests,
        passed=suite.passed_tests,
        failed=suite.failed_tests,
        duration=str(duration) if duration is not None else NOT_AVAILABLE,
    )


class SummaryRenderer:
    """Render the reviewer-facing Summary document."""

    def __init__(self, *, title: str = "Hiring Evaluation Summary") -> None:
        self._title = title

    def render(
        self,
        tests: TestReport,
        review: ReviewReport,
        *,
        generated_at: pendulum.DateTime | None = None,
    ) -> str:
        sections = [
            f"# {self._title}",
            self._test_results(tests),
            self._test_verdict(tests),
            self._review_score(review),
            self._category_table(review),
        ]
        if review.strengths:
            sections.append(_bullets("### Strengths", review.strengths))
        if review.improvements:
            sections.append(_bullets("### Improvements", review.improvements))
        sections.append(self._recommendation(review))
        sections.append(self._footer(generated_at))
        return "\n\n".join(sections) + "\n"

    def try_render(
        self,
        tests: TestReport,
        review: ReviewReport,
        *,
        generated_at: pendulum.DateTime | None = None,
    ) -> Result[str, str]:
        try:
            return Ok(self.render(tests, review, generated_at=generated_at))
        except Exception as exc:  # noqa: BLE001
            return Err(f"{type(exc).__name__}: {exc}")

    def render_minimal(
        self,
        *,
        test_error: str | None = None,
        review_error: str | None = None,
        render_error: str | None = None,
        config_error: str | None = None,
        generated_at: pendulum.DateTime | None = None,
    ) -> str:
        """Render the two-section Summary used when a full report cannot be produced."""
        sections = [
            f"# {self._title}",
            "> ⚠️ This report could not be produced. See the details below.",
        ]
        if config_error:
            sections.append(f"Configuration error: {_cell(config_error)}")
        sections += [
            "## Test Results\n\n" + _read_status(TEST_REPORT_LABEL, test_error),
            "## AI Review\n\n" + _read_status(REVIEW_REPORT_LABEL, review_error),
        ]
        if render_error:
            sections.append(f"Rendering failed: {_cell(render_error)}")
        sections.append(self._footer(generated_at))
        return "\n\n".join(sections) + "\n"

    @staticmethod
    def _test_results(tests: TestReport) -> str:
        lines = ["## Test Results", ""]
        if not tests.suites:
            lines.append("_No test suites reported._")
            return "\n".join(lines)
        lines.append("| Suite | Status | Total | Passed | Failed | Duration (ms) |")
        lines.append("|-------|--------|-------|--------|--------|---------------|")
        for row in (suite_row(suite) for suite in tests.suites):
            lines.append(
                f"| {_cell(row.name)} | {row.glyph} | {row.total} | {row.passed} "
                f"| {row.failed} | {row.duration} |"
            )
        failures = [
            (suite, assertion)
            for suite in tests.suites
            for assertion in suite.assertions
            if assertion.failed
        ]
        if failures:
            lines += [
                "",
                "### Failed Tests",
                "",
                "| Suite | Test | Duration (ms) | Message |",
                "|-------|------|---------------|---------|",
            ]
            for suite, assertion in failures:
                duration = assertion.duration_ms
                lines.append(
                    f"| {_cell(display_name(suite.name) or NOT_AVAILABLE)} "
                    f"| {_cell(assertion.title or NOT_AVAILABLE)} "
                    f"| {duration if duration is not None else NOT_AVAILABLE} "
                    f"| {_cell(_truncate(assertion.failure_message)) or '-'} |"
                )
        return "\n".join(lines)

    @staticmethod
    def _test_verdict(tests: TestReport) -> str:
        totals = tests.totals
        if totals.all_passed:
            return (
                f"**Overall:** {PASS_GLYPH} PASS "
                f"({totals.num_passed_tests}/{totals.num_total_tests} tests passed)"
            )
        return (
            f"**Overall:** {FAIL_GLYPH} FAIL "
            f"({totals.num_passed_tests}/{totals.num_total_tests} tests passed, "
            f"{totals.num_failed_tests} failed)"
        )

    @staticmethod
    def _review_score(review: ReviewReport) -> str:
        score = review.overall_score
        return (
            "## AI Review\n\n"
            f"**Overall Score:** {score_tier(score)} {format_score(score)}/10"
        )

    @staticmethod
    def _category_table(review: ReviewReport) -> str:
        lines = [
            "| Category | Score | Comments |",
            "|----------|-------|----------|",
        ]
        for label, category in review.categories():
            lines.append(
                f"| {label} | {format_score(category.score)}/10 | {_cell(category.comments)} |"
            )
        return "\n".join(lines)

    @staticmethod
    def _recommendation(review: ReviewReport) -> str:
        value = review.recommendation
        return f"## Final Recommendation\n\n{recommendation_glyph(value)} **{value}**"

    @staticmethod
    def _footer(generated_at: pendulum.DateTime | None) -> str:
        timestamp = (generated_at or pendulum.now("UTC")).to_iso8601_string()
        return f"---\n_Generated {timestamp} by hiringreport {__version__}_"


def _bullets(header: str, items: list[str]) -> str:
    return "\n".join([header, ""] + [f"- {_inline(item)}" for item in items])


def _read_status(label: str, error: str | None) -> str:
    if error is None:
        return f"The {label} was read successfully."
    return f"❌ Could not read {label}: {_cell(error)}"


def _truncate(text: str) -> str:
    if len(text) <= MESSAGE_LIMIT:
        return text
    return text[: MESSAGE_LIMIT - 1].rstrip() + "…"


def _inline(text: str) -> str:
    # List items and table cells are single-line.
    return " ".join(text.split())


def _cell(text: str) -> str:
    return _inline(text).replace("|", "\\|")
