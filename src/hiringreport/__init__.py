"""Test/AI-review aggregation and degraded-mode reporting for hiring pipelines."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
