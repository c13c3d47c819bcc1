"""Click CLI entry point for AI-GOS."""

from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING

import click

from aigos.config import Settings
from aigos.logging import configure_logging
from aigos.models.research import TOTAL_FIELDS
from aigos.urls import InvalidUrlError

if TYPE_CHECKING:
    from aigos.models.prefill import PrefillResponse
    from aigos.service import CompanyResearchService


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """AI-GOS: company research prefill for the Strategic Blueprint wizard."""
    ctx.ensure_object(dict)
    settings = Settings()
    log_level = "DEBUG" if verbose else settings.log_level
    configure_logging(log_level=log_level, log_format=settings.log_format)
    ctx.obj["settings"] = settings
    ctx.obj["verbose"] = verbose


async def _run_research(
    service: CompanyResearchService,
    website_url: str,
    linkedin_url: str | None,
) -> PrefillResponse | None:
    from aigos.mapper import count_fields_found
    from aigos.service import build_prefill_response
    from aigos.streaming import DeltaEvent, DoneEvent

    stream = await service.start(website_url, linkedin_url)
    click.echo(f"Researching {website_url} ({stream.mode.replace('_', '-')} mode)...", err=True)

    last_found = -1
    async for event in stream.events():
        if isinstance(event, DeltaEvent):
            found = count_fields_found(event.partial)
            if found != last_found:
                click.echo(f"  fields found: {found}/{TOTAL_FIELDS}", err=True)
                last_found = found
        elif isinstance(event, DoneEvent):
            return build_prefill_response(event.output, stream.mode)
        else:
            click.echo(f"Error: {event.error}", err=True)
    return None


def _print_summary(response: PrefillResponse) -> None:
    summary = response.summary
    click.echo(
        f"Found {summary.fields_found}/{TOTAL_FIELDS} fields "
        f"(primary source: {summary.primary_source.value})"
    )
    for warning in response.warnings:
        click.echo(f"  ! {warning}")

    for section in response.prefilled.sections:
        click.echo(f"\n[{section}]")
        values = getattr(response.prefilled, section).model_dump(exclude_none=True)
        for key, value in values.items():
            text = str(value)
            if len(text) > 100:
                text = text[:97] + "..."
            click.echo(f"  {key}: {text}")

    if response.citations:
        click.echo("\nSources:")
        for url in response.citations:
            click.echo(f"  - {url}")


@cli.command()
@click.argument("website_url")
@click.option("--linkedin", "linkedin_url", default=None, help="LinkedIn company page URL")
@click.option("--json", "as_json", is_flag=True, help="Print the full prefill response as JSON")
@click.pass_context
def research(
    ctx: click.Context, website_url: str, linkedin_url: str | None, as_json: bool
) -> None:
    """Research a company website and print the onboarding prefill."""
    from aigos.service import CompanyResearchService

    settings: Settings = ctx.obj["settings"]
    if not settings.anthropic_api_key:
        click.echo("Error: ANTHROPIC_API_KEY is not configured", err=True)
        sys.exit(1)

    service = CompanyResearchService(settings)
    try:
        response = asyncio.run(_run_research(service, website_url, linkedin_url))
    except InvalidUrlError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)

    if response is None:
        sys.exit(1)
    if as_json:
        click.echo(response.model_dump_json(by_alias=True, indent=2))
    else:
        _print_summary(response)


@cli.command("pricing")
@click.argument("website_url")
@click.pass_context
def pricing(ctx: click.Context, website_url: str) -> None:
    """Find and print a company's pricing page."""
    from aigos.clients.firecrawl import FirecrawlClient

    settings: Settings = ctx.obj["settings"]
    client = FirecrawlClient(
        api_key=settings.firecrawl_api_key,
        base_url=settings.firecrawl_base_url,
        max_retries=settings.firecrawl_max_retries,
    )
    result = asyncio.run(client.scrape_pricing_page(website_url))
    if not result.found:
        click.echo(f"Error: {result.error}", err=True)
        sys.exit(1)
    click.echo(f"# {result.title or result.url}\n")
    click.echo(result.markdown)


@cli.command("init-db")
@click.pass_context
def init_db(ctx: click.Context) -> None:
    """Create the database schema."""
    from aigos.db import Database

    settings: Settings = ctx.obj["settings"]
    settings.ensure_data_dir()
    db = Database(settings.db_path)
    try:
        db.init_schema()
    finally:
        db.close()
    click.echo(f"Database initialized at {settings.db_path}")


@cli.command()
@click.option("--host", type=str, default=None, help="Bind host")
@click.option("--port", type=int, default=None, help="Bind port")
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the FastAPI API server."""
    import uvicorn

    settings = ctx.obj["settings"]
    uvicorn.run(
        "aigos.api.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
    )
