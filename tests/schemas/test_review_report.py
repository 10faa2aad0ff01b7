from __future__ import annotations

import pytest
from pydantic import ValidationError

from hiringreport.schemas import CATEGORY_FIELDS, ReviewReport, normalize_review


def review_payload(**overrides):
    payload = {
        "overall_score": 8,
        "code_quality": {"score": 8, "comments": "Clean structure."},
        "best_practices": {"score": 7, "comments": "Mostly idiomatic."},
        "performance": {"score": 9, "comments": "Linear time."},
        "maintainability": {"score": 8, "comments": "Easy to extend."},
        "strengths": ["Readable"],
        "improvements": ["Add input validation"],
        "recommendation": "PASS",
    }
    payload.update(overrides)
    return payload


def test_review_report_valid_payload():
    review = ReviewReport.model_validate(review_payload())

    assert review.overall_score == 8
    assert [label for label, _ in review.categories()] == [
        "Code Quality",
        "Best Practices",
        "Performance",
        "Maintainability",
    ]


@pytest.mark.parametrize(
    "overrides",
    [
        {"overall_score": 11},
        {"overall_score": 0},
        {"recommendation": "MAYBE"},
        {"performance": {"score": 12, "comments": ""}},
        {"maintainability": None},
    ],
)
def test_review_report_rejects_illegal_values(overrides):
    with pytest.raises(ValidationError):
        ReviewReport.model_validate(review_payload(**overrides))


def test_normalize_review_keeps_valid_document():
    review, substituted = normalize_review(review_payload())

    assert substituted == []
    assert review.recommendation == "PASS"
    assert review.strengths == ["Readable"]


def test_normalize_review_substitutes_neutral_values():
    raw = review_payload(overall_score="high", recommendation="pass", strengths="none")
    del raw["performance"]

    review, substituted = normalize_review(raw)

    assert set(substituted) == {"overall_score", "performance", "strengths"}
    assert review.overall_score == 5
    assert review.performance.score == 5
    assert review.strengths == []
    assert review.recommendation == "PASS"


def test_normalize_review_unknown_recommendation_becomes_review():
    review, substituted = normalize_review(review_payload(recommendation="HIRE"))

    assert review.recommendation == "REVIEW"
    assert "recommendation" in substituted


def test_normalize_empty_document_has_every_field():
    review, substituted = normalize_review({})

    assert review.overall_score == 5
    assert review.recommendation == "REVIEW"
    for name in CATEGORY_FIELDS:
        assert getattr(review, name).score == 5
    assert set(CATEGORY_FIELDS) <= set(substituted)
