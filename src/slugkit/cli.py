"""CLI for slugkit."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import pydantic
import structlog
import typer
from rich.console import Console
from rich.logging import RichHandler
from sqlmodel import create_engine

from slugkit import __version__
from slugkit.core.config import SlugConfig, load_config
from slugkit.core.errors import ConfigurationError, SlugError
from slugkit.core.slug import available_sluggers
from slugkit.models import Entity
from slugkit.services import SlugService
from slugkit.services.storage import SQLRepository

# Configure structlog
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="slugkit",
    help="slugkit - Generate unique URL-safe slugs",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"slugkit v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True),
    ] = None,
) -> None:
    """slugkit CLI."""


def _configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _parse_scope(pairs: list[str] | None) -> dict[str, Any]:
    scope: dict[str, Any] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ConfigurationError(
                f"Invalid scope condition '{pair}'",
                "Use key=value, e.g. --scope site_id=3",
            )
        scope[key] = value
    return scope


def _build_config(config_path: Path | None, **overrides: Any) -> SlugConfig:
    config = load_config(config_path) if config_path else SlugConfig()
    changes = {k: v for k, v in overrides.items() if v is not None}
    return config.with_overrides(**changes) if changes else config


@app.command()
def slug(
    text: Annotated[str, typer.Argument(help="Text to turn into a slug")],
    separator: Annotated[
        str | None, typer.Option("--separator", "-s", help="Word separator")
    ] = None,
    slugger: Annotated[
        str | None, typer.Option("--slugger", help="Normalizer name (ascii, unidecode)")
    ] = None,
    max_length: Annotated[
        int | None, typer.Option("--max-length", help="Maximum slug length")
    ] = None,
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
    ] = None,
) -> None:
    """Preview the slug for TEXT without any uniqueness check."""
    try:
        config = _build_config(
            config_path,
            separator=separator,
            slugger=slugger,
            max_length=max_length,
            unique="disabled",
        )
        service = SlugService(config)
        # Slugs have no spaces, so Rich would hard-break them at the console width.
        console.print(service.slug(text), soft_wrap=True)
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except pydantic.ValidationError as e:
        console.print(f"[red]Invalid option:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def resolve(
    text: Annotated[str, typer.Argument(help="Source text for the slug")],
    db_url: Annotated[str, typer.Option("--db", help="SQLAlchemy database URL")],
    table: Annotated[str, typer.Option("--table", help="Table holding the slugs")],
    config_path: Annotated[
        Path | None, typer.Option("--config", "-c", help="Path to config YAML file")
    ] = None,
    scope: Annotated[
        list[str] | None,
        typer.Option("--scope", help="Extra uniqueness condition as key=value (repeatable)"),
    ] = None,
    exclude: Annotated[
        str | None, typer.Option("--exclude", help="Identity of the record being saved")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-V", help="Verbose output")] = False,
) -> None:
    """Compute a slug for TEXT that is unique in a database table."""
    _configure_logging(verbose)

    try:
        config = _build_config(config_path)
        # TEXT stands in for the joined source fields.
        source_field = config.source_fields[0]
        config = config.with_overrides(
            source_fields=[source_field],
            scope={**config.scope_conditions, **_parse_scope(scope)},
        )

        engine = create_engine(db_url)
        repository = SQLRepository.reflect(engine, table)
        service = SlugService(config, repository)

        data: dict[str, Any] = {source_field: text}
        if exclude is not None:
            data[config.primary_key] = exclude
        record = Entity(data, new=exclude is None, primary_key=config.primary_key)

        console.print(service.slug(record), soft_wrap=True)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except SlugError as e:
        console.print(f"[red]Slug error:[/red] {e}")
        raise typer.Exit(1) from e
    except pydantic.ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def validate(
    config_path: Annotated[Path, typer.Argument(help="Path to config YAML file")],
) -> None:
    """Validate a configuration file."""
    try:
        config = load_config(config_path)
        console.print("[green]Configuration is valid![/green]")
        console.print(f"  Field: {config.field}")
        console.print(f"  Source fields: {', '.join(config.source_fields)}")
        console.print(f"  Separator: {config.separator!r}")
        console.print(f"  Slugger: {config.slugger}")
        console.print(f"  Unique: {config.unique}")
        console.print(f"  Max length: {config.max_length}")
        console.print(f"  Replacements: {len(config.replacements)}")
        if config.scope:
            console.print(f"  Scope: {config.scope_conditions}")

        if config.slugger not in available_sluggers():
            console.print(
                f"[yellow]Warning:[/yellow] slugger '{config.slugger}' is not registered; "
                f"available: {', '.join(available_sluggers())}"
            )

    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e
    except ConfigurationError as e:
        console.print(f"[red]{e}")
        raise typer.Exit(1) from e
    except pydantic.ValidationError as e:
        console.print(f"[red]Validation error:[/red] {e}")
        raise typer.Exit(1) from e


@app.command()
def info() -> None:
    """Show tool information and example commands."""
    console.print("[bold]slugkit[/bold]")
    console.print(f"Version: {__version__}\n")
    console.print(f"Sluggers: {', '.join(available_sluggers())}\n")

    console.print("[bold]Example Commands:[/bold]")
    console.print("  # Preview a slug")
    console.print('  slugkit slug "Hello, World!"\n')

    console.print("  # Transliterate and use underscores")
    console.print('  slugkit slug "Straße & Café" --slugger unidecode -s _\n')

    console.print("  # Unique slug against a table")
    console.print('  slugkit resolve "Hello, World!" --db sqlite:///app.db --table articles\n')

    console.print("  # Unique per site, ignoring the record being edited")
    console.print(
        '  slugkit resolve "Hello" --db sqlite:///app.db --table articles '
        "--scope site_id=3 --exclude 42\n"
    )

    console.print("  # Validate config")
    console.print("  slugkit validate slug.yaml")


if __name__ == "__main__":
    app()
