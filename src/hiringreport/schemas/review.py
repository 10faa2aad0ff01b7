"""Review Report schema shared by real and fallback reviews."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

Recommendation = Literal["PASS", "REVIEW", "FAIL"]

RECOMMENDATIONS: tuple[str, ...] = ("PASS", "REVIEW", "FAIL")

# Fixed display order for the category table.
CATEGORY_FIELDS: tuple[str, ...] = (
    "code_quality",
    "best_practices",
    "performance",
    "maintainability",
)

CATEGORY_LABELS: dict[str, str] = {
    "code_quality": "Code Quality",
    "best_practices": "Best Practices",
    "performance": "Performance",
    "maintainability": "Maintainability",
}

MIN_SCORE = 1
MAX_SCORE = 10
NEUTRAL_SCORE = 5
NEUTRAL_RECOMMENDATION: Recommendation = "REVIEW"
MISSING_COMMENT = "Not provided in the review document."


class CategoryScore(BaseModel):
    """Score and reviewer comments for one rubric category."""

    score: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    comments: str = ""

    model_config = ConfigDict(extra="ignore")


class ReviewReport(BaseModel):
    """Structured qualitative assessment of candidate code."""

    overall_score: float = Field(ge=MIN_SCORE, le=MAX_SCORE)
    code_quality: CategoryScore
    best_practices: CategoryScore
    performance: CategoryScore
    maintainability: CategoryScore
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)
    recommendation: Recommendation

    model_config = ConfigDict(extra="ignore")

    def categories(self) -> list[tuple[str, CategoryScore]]:
        """Return ``(label, score)`` pairs in the fixed display order."""
        return [(CATEGORY_LABELS[name], getattr(self, name)) for name in CATEGORY_FIELDS]


_SCORE_ADAPTER = TypeAdapter(float)
_TEXT_LIST_ADAPTER = TypeAdapter(list[str])


def normalize_review(raw: dict[str, Any]) -> tuple[ReviewReport, list[str]]:
    """Coerce an untrusted review document into a canonical ``ReviewReport``.

    Fields that are missing or invalid are replaced by their neutral values
    (score 5, recommendation REVIEW, empty lists). Returns the normalized
    report and the names of the substituted fields.
    """
    substituted: list[str] = []
    values: dict[str, Any] = {}

    overall = _valid_score(raw.get("overall_score"))
    if overall is None:
        substituted.append("overall_score")
        overall = NEUTRAL_SCORE
    values["overall_score"] = overall

    for name in CATEGORY_FIELDS:
        try:
            values[name] = CategoryScore.model_validate(raw.get(name))
        except ValidationError:
            substituted.append(name)
            values[name] = CategoryScore(score=NEUTRAL_SCORE, comments=MISSING_COMMENT)

    for name in ("strengths", "improvements"):
        try:
            values[name] = _TEXT_LIST_ADAPTER.validate_python(raw.get(name, []))
        except ValidationError:
            substituted.append(name)
            values[name] = []

    recommendation = str(raw.get("recommendation") or "").strip().upper()
    if recommendation not in RECOMMENDATIONS:
        substituted.append("recommendation")
        recommendation = NEUTRAL_RECOMMENDATION
    values["recommendation"] = recommendation

    return ReviewReport.model_validate(values), substituted


def _valid_score(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        score = _SCORE_ADAPTER.validate_python(value)
    except ValidationError:
        return None
    if MIN_SCORE <= score <= MAX_SCORE:
        return score
    return None
