"""CLI commands for the digest job."""

import asyncio
import json
import logging
import sys
import uuid
from datetime import UTC, datetime

import click
import structlog

from hn_digest import __version__
from hn_digest.enricher import EnrichMetrics
from hn_digest.fetch import FetchMetrics
from hn_digest.observability import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
)
from hn_digest.pipeline import DigestRunResult, run_digest
from hn_digest.publisher import PublishError
from hn_digest.ranker import RankerMetrics
from hn_digest.ranker.constants import DEFAULT_STORY_CAP
from hn_digest.settings import ConfigurationError, DigestConfig, get_settings
from hn_digest.source import SourceError
from hn_digest.source.constants import DEFAULT_CANDIDATE_LIMIT


logger = get_logger(__name__)

COMPONENT_CLI = "cli"


def _setup_logging(
    json_logs: bool, verbose: bool, run_id: str, command: str
) -> structlog.typing.FilteringBoundLogger:
    """Set up logging and return a bound logger.

    Args:
        json_logs: Render JSON lines.
        verbose: Enable debug output.
        run_id: Unique run identifier.
        command: CLI command name.

    Returns:
        Bound logger with run context.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level=log_level, json_format=json_logs)
    bind_run_context(run_id)
    return logger.bind(component=COMPONENT_CLI, command=command)  # type: ignore[no-any-return]


def _echo_summary(result: DigestRunResult) -> None:
    ranked = result.ranker_result
    click.echo(
        f"Inspected {result.candidate_ids} stories, fetched {result.candidates_fetched}, "
        f"ranked {ranked.stories_out} (dropped {ranked.dropped_total})."
    )
    for index, story in enumerate(result.stories, start=1):
        item = story.scored.item
        click.echo(f"  {index}. [{story.scored.relevance_score}] {item.title}")


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Hacker News AI digest CLI."""


@cli.command()
@click.option(
    "--cap",
    "story_cap",
    type=click.IntRange(1, 50),
    default=DEFAULT_STORY_CAP,
    show_default=True,
    help="Maximum number of stories in the digest.",
)
@click.option(
    "--limit",
    "candidate_limit",
    type=click.IntRange(1, 500),
    default=DEFAULT_CANDIDATE_LIMIT,
    show_default=True,
    help="Number of top stories to inspect.",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the message payload instead of posting it.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def run(
    story_cap: int,
    candidate_limit: int,
    dry_run: bool,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Run the digest: fetch, rank, enrich and publish.

    Reads SLACK_WEBHOOK_URL from the environment (or .env). The webhook is
    validated before any network call; a dry run does not need it.
    """
    run_id = str(uuid.uuid4())
    log = _setup_logging(json_logs, verbose, run_id, "run")

    try:
        config = DigestConfig.from_settings(
            get_settings(),
            story_cap=story_cap,
            candidate_limit=candidate_limit,
            dry_run=dry_run,
        )
    except ConfigurationError as e:
        log.error("config_invalid", error=str(e))
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)

    log.info(
        "config_loaded",
        story_cap=config.story_cap,
        candidate_limit=config.candidate_limit,
        dry_run=config.dry_run,
    )

    try:
        result = asyncio.run(run_digest(config, run_id, now=datetime.now(UTC)))
    except SourceError as e:
        log.error("source_failed", error=str(e), status_code=e.status_code)
        click.echo(f"Could not fetch stories: {e}", err=True)
        sys.exit(1)
    except PublishError as e:
        log.error("publish_failed", error=str(e), status_code=e.status_code)
        click.echo(f"Publish failed: {e}", err=True)
        sys.exit(1)
    finally:
        log.info(
            "run_metrics",
            fetch=FetchMetrics.get_instance().to_dict(),
            enrich=EnrichMetrics.get_instance().to_dict(),
            ranker=RankerMetrics.get_instance().to_dict(),
        )
        clear_run_context()

    if config.dry_run:
        click.echo(json.dumps(result.payload.to_dict(), indent=2, ensure_ascii=False))
    else:
        _echo_summary(result)
