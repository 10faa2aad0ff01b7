"""Test Report schema.

Test Reports come from an external test executor, so every per-suite field is
optional here. Missing or malformed counts normalize to ``0`` and timestamps
to ``None``. Both the native ``suites``/``totals`` layout and raw Jest
``--json`` output (``testResults`` with ``assertionResults``) are accepted.
"""

from __future__ import annotations

import math
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

SuiteStatus = Literal["PASSED", "FAILED"]

_PASSED_ASSERTION = "passed"
_FAILED_ASSERTION = "failed"


class AssertionResult(BaseModel):
    """One test case inside a suite, as reported by Jest ``assertionResults``."""

    title: str = ""
    status: str = ""
    duration_ms: int | None = None
    failure_message: str = ""

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        title = str(data.get("title") or "")
        ancestors = data.get("ancestorTitles")
        if isinstance(ancestors, list):
            path = [str(item) for item in ancestors if item]
            if title:
                path.append(title)
            title = " › ".join(path)
        messages = data.get("failureMessages")
        failure_message = ""
        if isinstance(messages, list):
            failure_message = next(
                (line.strip() for item in messages for line in str(item).splitlines() if line.strip()),
                "",
            )
        return {
            "title": title or str(data.get("fullName") or ""),
            "status": _assertion_status(data),
            "duration_ms": _as_millis(data.get("duration")),
            "failure_message": failure_message,
        }

    @property
    def failed(self) -> bool:
        return self.status == _FAILED_ASSERTION


class SuiteResult(BaseModel):
    """One executed test suite."""

    name: str = ""
    status: SuiteStatus = "PASSED"
    total_tests: int = Field(default=0, ge=0)
    passed_tests: int = Field(default=0, ge=0)
    failed_tests: int = Field(default=0, ge=0)
    start_time: int | None = None
    end_time: int | None = None
    assertions: list[AssertionResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("suite entry must be an object")

        assertions = data.get("assertionResults")
        if not isinstance(assertions, list):
            assertions = []
        statuses = [_assertion_status(item) for item in assertions]

        passed = _first_count(data, "passedTests", "numPassingTests", "passed_tests")
        failed = _first_count(data, "failedTests", "numFailingTests", "failed_tests")
        if passed is None:
            passed = statuses.count(_PASSED_ASSERTION)
        if failed is None:
            failed = statuses.count(_FAILED_ASSERTION)

        total = _first_count(data, "totalTests", "numTotalTests", "total_tests")
        if total is None:
            total = len(assertions) if assertions else passed + failed
        total = max(total, passed + failed)

        return {
            "name": str(data.get("name") or ""),
            "status": _suite_status(data.get("status"), failed),
            "total_tests": total,
            "passed_tests": passed,
            "failed_tests": failed,
            "start_time": _as_millis(data.get("startTime", data.get("start_time"))),
            "end_time": _as_millis(data.get("endTime", data.get("end_time"))),
            "assertions": [item for item in assertions if isinstance(item, dict)],
        }

    @property
    def duration_ms(self) -> int | None:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    @property
    def passed(self) -> bool:
        return self.failed_tests == 0


class RunTotals(BaseModel):
    """Top-level test counts; authoritative for the overall verdict."""

    num_total_tests: int = Field(default=0, ge=0)
    num_passed_tests: int = Field(default=0, ge=0)
    num_failed_tests: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("totals must be an object")
        total = _first_count(data, "numTotalTests", "num_total_tests")
        passed = _first_count(data, "numPassedTests", "num_passed_tests")
        failed = _first_count(data, "numFailedTests", "num_failed_tests")
        if total is None and passed is None and failed is None:
            raise ValueError("totals carry no test counts")
        if failed is None:
            failed = max((total or 0) - (passed or 0), 0)
        if passed is None:
            passed = max((total or 0) - failed, 0)
        if total is None:
            total = passed + failed
        return {
            "num_total_tests": total,
            "num_passed_tests": passed,
            "num_failed_tests": failed,
        }

    @property
    def all_passed(self) -> bool:
        return self.num_failed_tests == 0


class TestReport(BaseModel):
    """Provider-neutral Test Report."""

    __test__ = False

    suites: list[SuiteResult] = Field(default_factory=list)
    totals: RunTotals

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_payload(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("test report must be an object")

        suites = data.get("suites")
        if suites is None:
            suites = data.get("testResults")
        if suites is not None and not isinstance(suites, list):
            raise ValueError("suites must be a list")

        totals = data.get("totals")
        if isinstance(totals, dict) and not totals:
            totals = None
        if totals is None and any(key in data for key in _JEST_TOTAL_KEYS):
            totals = {key: data[key] for key in _JEST_TOTAL_KEYS if key in data}

        if totals is None:
            if suites is None:
                raise ValueError("test report has neither suites nor totals")
            parsed = [SuiteResult.model_validate(item) for item in suites]
            totals = {
                "numTotalTests": sum(s.total_tests for s in parsed),
                "numPassedTests": sum(s.passed_tests for s in parsed),
                "numFailedTests": sum(s.failed_tests for s in parsed),
            }

        return {"suites": suites or [], "totals": totals}


_JEST_TOTAL_KEYS = ("numTotalTests", "numPassedTests", "numFailedTests")


def _first_count(data: dict[str, Any], *keys: str) -> int | None:
    for key in keys:
        if key in data:
            count = _as_count(data[key])
            if count is not None:
                return count
    return None


def _as_count(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and value.is_integer():
        return max(int(value), 0)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_millis(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    return None


def _assertion_status(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("status") or "").lower()
    return ""


def _suite_status(value: Any, failed: int) -> SuiteStatus:
    normalized = str(value or "").strip().upper()
    if normalized in ("PASSED", "FAILED"):
        return normalized  # type: ignore[return-value]
    return "FAILED" if failed else "PASSED"
