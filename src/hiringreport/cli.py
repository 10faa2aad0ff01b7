"""Typer CLI entrypoint for the review and summary commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import structlog
import typer
import yaml

from .container import create_container
from .core.summary import REVIEW_REPORT_LABEL, TEST_REPORT_LABEL
from .logging import bind_run_context, configure_logging
from .pipeline import ReviewPipeline
from .schemas.config import AppConfig, load_config

app = typer.Typer(help="Hiring evaluation review and summary CLI.")

SUMMARY_FALLBACK_EXIT = 1
SUMMARY_UNWRITABLE_EXIT = 2
REVIEW_UNWRITABLE_EXIT = 1

CONFIG_SKIPPED_REASON = "not read because the configuration is invalid"


def _load_settings(config: Path | None) -> dict[str, Any]:
    if not config:
        return {}
    with config.open("r", encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ValueError("config file must be a YAML mapping")
    return loaded


def _resolve_config(config: Path | None) -> tuple[dict[str, Any], AppConfig, str | None]:
    """Return settings, validated config and, when the file is unusable, the reason."""
    try:
        settings = _load_settings(config)
        return settings, load_config(settings), None
    except (OSError, yaml.YAMLError, ValueError, TypeError) as exc:
        return {}, AppConfig(), f"{config}: {exc}"


def _write_review_fallback(pipeline: ReviewPipeline, output_path: Path, logger: Any) -> None:
    try:
        pipeline.write_fallback(output_path)
    except OSError as exc:
        logger.error("review.unwritable", path=str(output_path), error=str(exc))
        raise typer.Exit(code=REVIEW_UNWRITABLE_EXIT) from exc


@app.command()
def review(
    code: Optional[Path] = typer.Option(None, dir_okay=False, help="Candidate code file to review."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Review Report JSON output path."),
    config: Optional[Path] = typer.Option(None, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
    api_key: Optional[str] = typer.Option(
        None,
        envvar="OPENAI_API_KEY",
        show_default=False,
        help="Review service API key.",
    ),
) -> None:
    """Generate the AI Review Report, falling back to a neutral review on any failure."""
    configure_logging(log_level)
    bind_run_context(command="review")
    logger = structlog.get_logger(__name__)

    settings, app_config, config_error = _resolve_config(config)
    output_path = output or app_config.paths.review_report

    if config_error:
        logger.error("review.config_invalid", error=config_error)
        pipeline = create_container(api_key=api_key).review_pipeline()
        _write_review_fallback(pipeline, output_path, logger)
        typer.echo(f"Configuration is invalid. Fallback review saved to {output_path}.")
        return

    code_path = code or app_config.paths.candidate_code
    container = create_container(settings=settings, api_key=api_key)
    pipeline = container.review_pipeline()

    try:
        outcome = pipeline.run(code_path=code_path, output_path=output_path)
    except Exception:  # noqa: BLE001
        logger.exception("review.unexpected_error")
        _write_review_fallback(pipeline, output_path, logger)
        typer.echo(f"AI review failed unexpectedly. Fallback review saved to {output_path}.")
        return

    if outcome.degraded:
        typer.echo(f"AI review degraded ({outcome.cause.value}). Fallback review saved to {output_path}.")
    else:
        typer.echo(f"AI review completed. Review saved to {output_path}.")


@app.command()
def summarize(
    test_report: Optional[Path] = typer.Option(None, dir_okay=False, help="Test Report JSON path."),
    review_report: Optional[Path] = typer.Option(None, dir_okay=False, help="Review Report JSON path."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Summary markdown output path."),
    config: Optional[Path] = typer.Option(None, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("INFO", help="Log level for structured logging."),
) -> None:
    """Merge the Test Report and Review Report into the Summary markdown."""
    configure_logging(log_level)
    bind_run_context(command="summarize")
    logger = structlog.get_logger(__name__)

    settings, app_config, config_error = _resolve_config(config)
    output_path = output or app_config.paths.summary

    container = create_container(settings=settings)
    pipeline = container.summary_pipeline()

    try:
        if config_error:
            logger.error("summary.config_invalid", error=config_error)
            outcome = pipeline.write_minimal(
                output_path=output_path,
                errors={
                    "config": config_error,
                    TEST_REPORT_LABEL: CONFIG_SKIPPED_REASON,
                    REVIEW_REPORT_LABEL: CONFIG_SKIPPED_REASON,
                },
            )
        else:
            outcome = pipeline.run(
                test_report_path=test_report or app_config.paths.test_report,
                review_path=review_report or app_config.paths.review_report,
                output_path=output_path,
            )
    except OSError as exc:
        logger.error("summary.unwritable", path=str(output_path), error=str(exc))
        raise typer.Exit(code=SUMMARY_UNWRITABLE_EXIT) from exc

    if not outcome.complete:
        typer.echo(f"Summary could not be fully produced. Minimal summary saved to {output_path}.", err=True)
        raise typer.Exit(code=SUMMARY_FALLBACK_EXIT)
    typer.echo(f"Summary saved to {output_path}.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
