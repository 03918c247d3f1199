"""CLI entrypoints for seek."""

from __future__ import annotations

import asyncio
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as package_version
from pathlib import Path
from typing import NoReturn, Optional

import typer
from rich.console import Console

from seek.config import Settings, load_settings
from seek.errors import PlanRefusedError, SeekError
from seek.logging import configure_logging, get_logger, run_context
from seek.models.search import SearchResult
from seek.orchestrator.runner import build_service, new_run_id
from seek.recording.page_writer import PageWriter
from seek.tools.acquisition import ContentAcquirer
from seek.tools.web_search import get_search_provider, search_options_from_settings

app = typer.Typer(add_completion=False, help="Plan-driven web research from the command line")
logger = get_logger(__name__)
err_console = Console(stderr=True)


def _settings(ctx: typer.Context) -> Settings:
    return ctx.obj["settings"]


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help="Path to a .env file (overrides SEEK_ENV_FILE)"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (overrides SEEK_LOG_LEVEL)"),
) -> None:
    settings = load_settings(env_file)
    configure_logging(log_level or settings.log_level, settings.log_file)
    ctx.obj = {"settings": settings}


@app.command()
def answer(
    ctx: typer.Context,
    question: list[str] = typer.Argument(..., help="Information request"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the report to this file"),
) -> None:
    """Plan the searches for a request, run them and write a report."""

    settings = _settings(ctx)
    request = " ".join(question).strip()
    if not request:
        raise typer.BadParameter("The question is empty.")

    async def _run() -> str:
        async with build_service(settings) as service:
            return await service.answer(request)

    logger.info("CLI answer requested")
    try:
        report = asyncio.run(_run())
    except PlanRefusedError as e:
        _fail(f"request refused: {e.reason}")
    except (SeekError, ValueError) as e:
        _fail(str(e))

    if output is None:
        typer.echo(report)
        return
    path = PageWriter(output.parent).save_report(report, output.name)
    typer.echo(str(path))


@app.command()
def read(
    ctx: typer.Context,
    urls: list[str] = typer.Argument(..., help="URLs to read"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Directory for page files"),
) -> None:
    """Read web pages and save their text as markdown files."""

    settings = _settings(ctx)
    writer = PageWriter(output_dir or settings.output_dir)

    async def _run():
        with run_context(run_id=new_run_id(), step="read"):
            async with ContentAcquirer(settings) as acquirer:
                return await acquirer.acquire(urls)

    result = asyncio.run(_run())
    for path in writer.save_pages(result.pages):
        typer.echo(f"Saved {path}")

    if result.errors:
        err_console.print("\nErrors occurred while processing the following URLs:")
        for error in result.errors:
            err_console.print(f"- {error.url}: {error.error}")
    if not result.pages:
        raise typer.Exit(code=1)


def _print_results(results: list[SearchResult]) -> None:
    console = Console()
    for r in results:
        console.print(f"[bold]{r.rank}. {r.title or r.url}[/bold]")
        console.print(f"   {r.url}", style="cyan", markup=False)
        if r.snippet:
            console.print(f"   {r.snippet}", markup=False)
        console.print()


@app.command()
def web(
    ctx: typer.Context,
    query: list[str] = typer.Argument(..., help="Search query"),
    engine: Optional[str] = typer.Option(None, "--engine", help="tavily, google or duckduckgo"),
    num: Optional[int] = typer.Option(None, "--num", "-n", min=1, max=50, help="Number of results"),
    lang: Optional[str] = typer.Option(None, "--lang", help="Restrict results by language, e.g. en"),
    date: Optional[str] = typer.Option(None, "--date", help="Recency window: d1, w2, m6, y1"),
    country: Optional[str] = typer.Option(None, "--country", help="Restrict results by country, e.g. us"),
    site: Optional[str] = typer.Option(None, "--site", help="Only results from this domain"),
    exclude_site: Optional[str] = typer.Option(None, "--exclude-site", help="Drop results from this domain"),
    safe: Optional[bool] = typer.Option(None, "--safe/--no-safe", help="Safe search filtering"),
) -> None:
    """Search the web and print the results."""

    settings = _settings(ctx)
    text = " ".join(query).strip()
    try:
        provider = get_search_provider(settings, engine)
        options = search_options_from_settings(
            settings,
            max_results=num,
            language=lang,
            date_restrict=date,
            country=country,
            include_domain=site,
            exclude_domain=exclude_site,
            safe_search=safe,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    try:
        results = asyncio.run(provider.search(text, options))
    except SeekError as e:
        _fail(str(e))
    _print_results(results)


@app.command()
def version() -> None:
    """Print the installed seek version."""

    try:
        typer.echo(f"seek {package_version('seek')}")
    except PackageNotFoundError:
        _fail("seek is not installed as a package")


if __name__ == "__main__":
    app()
