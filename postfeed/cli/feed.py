"""CLI commands for browsing the post feed."""

import asyncio
import json
import sys
import uuid
from pathlib import Path

import click
import structlog

from postfeed.config.constants import COMPONENT_CLI
from postfeed.config.loader import ConfigValidationError, load_config
from postfeed.config.schemas import FeedConfig
from postfeed.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
)
from postfeed.posts.errors import InitializationError
from postfeed.posts.factory import create_feed
from postfeed.posts.models import PageResult
from postfeed.settings.app import AppSettings, get_settings


logger = structlog.get_logger()

OUTPUT_TEXT = "text"
OUTPUT_JSON = "json"


def _load_configuration(config_path: Path | None, settings: AppSettings) -> FeedConfig:
    """Load file configuration and apply environment overrides.

    Exits with status 1 on validation failure.
    """
    try:
        return settings.apply(load_config(config_path))
    except ConfigValidationError as e:
        click.echo("Configuration validation failed:", err=True)
        for error in e.errors:
            location = error["location"] or "<root>"
            click.echo(f"  - {location}: {error['message']}", err=True)
        sys.exit(1)


def _render_page(page: PageResult, page_number: int, output_format: str) -> None:
    """Print one page of posts."""
    if output_format == OUTPUT_JSON:
        click.echo(json.dumps(page.to_dict(), ensure_ascii=False))
        return

    click.echo(f"Page {page_number}")
    for post in page.posts:
        suffix = " [details unavailable]" if post.error else ""
        click.echo(
            f"  #{post.id} {post.title} "
            f"(likes: {post.like_count}, comments: {len(post.comments)}){suffix}"
        )
        for comment in post.comments:
            click.echo(f"      {comment.author_username or 'anonymous'}: {comment.body}")


async def _walk_pages(
    config: FeedConfig,
    run_id: str,
    max_pages: int | None,
    output_format: str,
) -> int:
    """Initialize the feed and print pages until done or the limit is hit.

    Returns:
        Number of pages printed.
    """
    async with create_feed(config, run_id=run_id) as feed:
        page = await feed.controller.initialize()
        shown = 1
        _render_page(page, shown, output_format)

        while page.has_more and (max_pages is None or shown < max_pages):
            page = await feed.controller.load_next_page()
            shown += 1
            _render_page(page, shown, output_format)

        if not page.has_more and output_format == OUTPUT_TEXT:
            click.echo("No more posts.")

    return shown


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Post feed: ranked posts with comments from a JSON API."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a YAML configuration file",
)
@click.option(
    "--pages",
    "max_pages",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after this many pages (default: all)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([OUTPUT_TEXT, OUTPUT_JSON]),
    default=OUTPUT_TEXT,
    show_default=True,
    help="Output format",
)
@click.option(
    "--log-level",
    default=None,
    help="Log level (default: POSTFEED_LOG_LEVEL or INFO)",
)
@click.option(
    "--json-logs/--console-logs",
    default=False,
    help="Emit logs as JSON",
)
def pages(
    config_path: Path | None,
    max_pages: int | None,
    output_format: str,
    log_level: str | None,
    json_logs: bool,
) -> None:
    """Load the listing and print it page by page."""
    settings = get_settings()
    configure_logging(
        level=log_level or settings.log_level,
        output=sys.stderr,
        json_format=json_logs,
    )
    config = _load_configuration(config_path, settings)

    run_id = uuid.uuid4().hex[:12]
    bind_run_context(run_id)
    log = logger.bind(component=COMPONENT_CLI)
    log.info("feed_started", base_url=config.base_url, max_pages=max_pages)

    try:
        shown = asyncio.run(_walk_pages(config, run_id, max_pages, output_format))
    except InitializationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        clear_run_context()

    log.info("feed_finished", pages_shown=shown)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to a YAML configuration file",
)
def validate(config_path: Path | None) -> None:
    """Validate configuration and print the effective values."""
    settings = get_settings()
    configure_logging(level="WARNING", output=sys.stderr, json_format=False)
    config = _load_configuration(config_path, settings)

    click.echo("Configuration is valid!")
    click.echo(f"  Base URL: {config.base_url}")
    click.echo(f"  Page size: {config.pagination.page_size}")
    click.echo(f"  Max concurrent: {config.pagination.max_concurrent}")
    click.echo(f"  Request timeout: {config.fetch.request_timeout_ms}ms")
    click.echo(f"  Max retries: {config.fetch.retry_policy.max_retries}")
    click.echo(f"  Retry delay: {config.fetch.retry_policy.retry_delay_ms}ms")
    click.echo(f"  Cache TTL: {config.fetch.cache_ttl_ms}ms")


if __name__ == "__main__":
    cli()
