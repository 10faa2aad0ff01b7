"""Dependency injection container for the reporting commands."""

from __future__ import annotations

from dependency_injector import containers, providers

from .core import ReviewGenerator, SummaryRenderer
from .llm import HTTPReviewClient
from .pipeline import (
    OutputWriter,
    ReviewPipeline,
    ReviewReportLoader,
    SummaryPipeline,
    TestReportLoader,
)
from .schemas.config import load_config


class ReportingContainer(containers.DeclarativeContainer):
    """Dependency-injector container definition."""

    config = providers.Configuration()

    writer = providers.Singleton(OutputWriter)

    review_client = providers.Singleton(
        HTTPReviewClient,
        endpoint=config.review.endpoint,
        model=config.review.model,
        temperature=config.review.temperature,
        max_tokens=config.review.max_tokens,
        timeout=config.review.timeout,
    )

    review_generator = providers.Factory(
        ReviewGenerator,
        client=review_client,
        api_key=config.api_key,
        snippet_limit=config.review.snippet_limit,
    )

    review_pipeline = providers.Factory(
        ReviewPipeline,
        generator=review_generator,
        writer=writer,
    )

    test_report_loader = providers.Singleton(TestReportLoader)
    review_report_loader = providers.Singleton(ReviewReportLoader)

    summary_renderer = providers.Singleton(
        SummaryRenderer,
        title=config.summary.title,
    )

    summary_pipeline = providers.Factory(
        SummaryPipeline,
        renderer=summary_renderer,
        test_loader=test_report_loader,
        review_loader=review_report_loader,
        writer=writer,
    )


def create_container(*, settings: dict | None = None, api_key: str | None = None) -> ReportingContainer:
    """Instantiate container from validated settings."""

    app_config = load_config(settings)
    container = ReportingContainer()
    container.config.from_dict(app_config.to_settings())
    container.config.api_key.from_value(api_key)
    return container
