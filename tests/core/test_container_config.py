from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from hiringreport.container import create_container
from hiringreport.schemas.config import DEFAULT_MODEL, AppConfig, load_config


def test_create_container_defaults():
    container = create_container()

    client = container.review_client()
    generator = container.review_generator()

    assert client._model == DEFAULT_MODEL
    assert client._timeout == 60.0
    assert generator._api_key is None
    assert generator._snippet_limit == 2000


def test_create_container_with_overrides():
    container = create_container(
        settings={
            "review": {"model": "gpt-4o-mini", "snippet_limit": 500, "timeout": 5},
            "summary": {"title": "Candidate Report"},
        },
        api_key="sk-test",
    )

    client = container.review_client()
    generator = container.review_generator()
    renderer = container.summary_renderer()

    assert client._model == "gpt-4o-mini"
    assert client._timeout == 5
    assert generator._api_key == "sk-test"
    assert generator._snippet_limit == 500
    assert renderer._title == "Candidate Report"


def test_load_config_validation():
    app_config = load_config({"paths": {"summary": "out/summary.md"}})

    assert isinstance(app_config, AppConfig)
    assert app_config.paths.summary == Path("out/summary.md")
    assert app_config.paths.test_report == Path("hiring-tests/report.json")
    settings = app_config.to_settings()
    assert settings["review"]["model"] == DEFAULT_MODEL


def test_load_config_rejects_unknown_keys():
    with pytest.raises(ValidationError):
        load_config({"review": {"temperature": 5}})
    with pytest.raises(ValidationError):
        load_config({"review": {"retries": 3}})
    with pytest.raises(TypeError):
        load_config(["not", "a", "mapping"])
