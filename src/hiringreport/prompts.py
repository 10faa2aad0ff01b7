"""Prompt text and tool schema for the remote review request."""

from __future__ import annotations

from typing import Any

from .schemas import CATEGORY_FIELDS, CATEGORY_LABELS, RECOMMENDATIONS

REVIEW_TOOL_NAME = "submit_review"

SYSTEM_PROMPT = """You are an expert code reviewer evaluating a hiring candidate's submission.
Focus on readability, performance and requirements compliance.

Score each category from 1 to 10:
- Code Quality: structure, naming, clarity and correctness.
- Best Practices: idiomatic use of the language, error handling, conventions.
- Performance: algorithmic efficiency and resource usage.
- Maintainability: modularity, testability and ease of change.

Score bands:
- 9-10: excellent, production ready
- 7-8: good, minor issues only
- 5-6: adequate, noticeable issues
- 3-4: weak, significant issues
- 1-2: poor, fundamentally flawed

Give an overall_score from 1 to 10 and list concrete strengths and improvements.
Recommend PASS for strong submissions, FAIL for clearly insufficient ones and
REVIEW when a human should take a closer look.
Always answer by calling the submit_review tool."""


def build_user_prompt(snippet: str, *, language: str = "js") -> str:
    return f"Please review this code snippet:\n```{language}\n{snippet}\n```"


def _category_schema(label: str) -> dict[str, Any]:
    return {
        "type": "object",
        "description": f"{label} assessment.",
        "properties": {
            "score": {"type": "number", "minimum": 1, "maximum": 10},
            "comments": {"type": "string"},
        },
        "required": ["score", "comments"],
        "additionalProperties": False,
    }


def review_tool() -> dict[str, Any]:
    """Function-calling tool whose arguments are a Review Report."""
    properties: dict[str, Any] = {
        "overall_score": {"type": "number", "minimum": 1, "maximum": 10},
    }
    for name in CATEGORY_FIELDS:
        properties[name] = _category_schema(CATEGORY_LABELS[name])
    properties["strengths"] = {"type": "array", "items": {"type": "string"}}
    properties["improvements"] = {"type": "array", "items": {"type": "string"}}
    properties["recommendation"] = {"type": "string", "enum": list(RECOMMENDATIONS)}

    return {
        "type": "function",
        "function": {
            "name": REVIEW_TOOL_NAME,
            "description": "Submit the structured code review.",
            "parameters": {
                "type": "object",
                "properties": properties,
                "required": list(properties),
                "additionalProperties": False,
            },
        },
    }
