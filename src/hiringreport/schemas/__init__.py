"""Pydantic schema definitions for the pipeline documents."""

from __future__ import annotations

from .review import (
    CATEGORY_FIELDS,
    CATEGORY_LABELS,
    RECOMMENDATIONS,
    CategoryScore,
    Recommendation,
    ReviewReport,
    normalize_review,
)
from .test_report import AssertionResult, RunTotals, SuiteResult, TestReport

__all__ = [
    "AssertionResult",
    "CATEGORY_FIELDS",
    "CATEGORY_LABELS",
    "RECOMMENDATIONS",
    "CategoryScore",
    "Recommendation",
    "ReviewReport",
    "RunTotals",
    "SuiteResult",
    "TestReport",
    "normalize_review",
]
