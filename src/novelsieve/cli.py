"""Command-line interface for novelsieve.

Runs the extraction pipeline over HTML files already saved to disk; fetching
pages is left to whatever downloaded them.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click
import structlog
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from novelsieve import __version__
from novelsieve.config import Config, find_config_file
from novelsieve.extractor import BookInfo, ExtractionError, ExtractionPipeline
from novelsieve.observability import configure_logging
from novelsieve.utils import atomic_write_json, atomic_write_text

console = Console()
logger = structlog.get_logger(__name__)


def _load_config(config_path: Optional[Path], log_level: Optional[str]) -> Config:
    if config_path is None:
        config_path = find_config_file()
    config = Config.from_yaml(config_path) if config_path else Config()
    if log_level:
        config.monitoring.log_level = log_level
    return config


def _read_page(path: Path) -> bytes:
    return path.read_bytes()


def _render_book(book: BookInfo) -> None:
    console.print(
        Panel.fit(
            f"[bold]{book.title}[/bold]\n作者: {book.author}\nChapters: {len(book.chapters)}",
            title="Book",
        )
    )
    if not book.chapters:
        return
    table = Table(title="Chapters")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Title", style="magenta")
    table.add_column("URL")
    for index, chapter in enumerate(book.chapters, start=1):
        table.add_row(str(index), chapter.title, chapter.url)
    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides configuration)",
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], log_level: Optional[str]) -> None:
    """novelsieve - extract books and chapters from saved novel pages."""
    ctx.ensure_object(dict)
    try:
        loaded = _load_config(Path(config) if config else None, log_level)
    except (ValidationError, yaml.YAMLError) as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e
    configure_logging(loaded.monitoring)
    logger.debug("CLI configured", config_file=config, log_level=loaded.monitoring.log_level)
    ctx.obj["config"] = loaded
    ctx.obj["pipeline"] = ExtractionPipeline(loaded.extraction)


@cli.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", required=True, help="Original URL of the page, used to resolve chapter links")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the JSON result to a file")
@click.pass_context
def book(ctx: click.Context, page: Path, url: str, as_json: bool, output: Optional[Path]) -> None:
    """Extract title, author and chapter list from a saved book page."""
    pipeline: ExtractionPipeline = ctx.obj["pipeline"]
    try:
        result = pipeline.extract_book(_read_page(page), url)
    except ExtractionError as e:
        console.print(f"[red]Extraction failed: {e}[/red]")
        sys.exit(1)

    if output:
        atomic_write_json(output, result.to_dict())
        console.print(f"[green]Wrote {output}[/green]")
    elif as_json:
        click.echo(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    else:
        _render_book(result)


@cli.command()
@click.argument("page", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--url", default="", help="Original URL of the page")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write the text to a file")
@click.pass_context
def chapter(ctx: click.Context, page: Path, url: str, output: Optional[Path]) -> None:
    """Extract the body text of a saved chapter page."""
    pipeline: ExtractionPipeline = ctx.obj["pipeline"]
    try:
        result = pipeline.extract_chapter(_read_page(page), url)
    except ExtractionError as e:
        console.print(f"[red]Extraction failed: {e}[/red]")
        sys.exit(1)

    if not result.found:
        console.print("[yellow]No chapter content found on this page[/yellow]")
        sys.exit(2)

    if output:
        atomic_write_text(output, result.content + "\n")
        console.print(f"[green]Wrote {output}[/green]")
    else:
        click.echo(result.content)


@cli.command("config-show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration."""
    config: Config = ctx.obj["config"]
    click.echo(json.dumps(config.model_dump(mode="json"), ensure_ascii=False, indent=2))


def main() -> None:
    """Main CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
