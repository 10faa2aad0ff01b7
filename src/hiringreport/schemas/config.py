"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4"


class ReviewSettings(BaseModel):
    endpoint: str = DEFAULT_ENDPOINT
    model: str = DEFAULT_MODEL
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=800, gt=0)
    timeout: float = Field(default=60.0, gt=0)
    snippet_limit: int = Field(default=2000, gt=0)

    model_config = ConfigDict(extra="forbid")


class PathSettings(BaseModel):
    candidate_code: Path = Path("hiring-tests/src/tracker.js")
    test_report: Path = Path("hiring-tests/report.json")
    review_report: Path = Path("hiring-tests/ai_review.json")
    summary: Path = Path("hiring-tests/summary.md")

    model_config = ConfigDict(extra="forbid")


class SummarySettings(BaseModel):
    title: str = "Hiring Evaluation Summary"

    model_config = ConfigDict(extra="forbid")


class AppConfig(BaseModel):
    review: ReviewSettings = Field(default_factory=ReviewSettings)
    paths: PathSettings = Field(default_factory=PathSettings)
    summary: SummarySettings = Field(default_factory=SummarySettings)

    def to_settings(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise TypeError("Config must be a mapping")
    return AppConfig.model_validate(raw)
