"""Click CLI for imgresize — run the resize server and manage its cache."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from imgresize.config.defaults import DEFAULT_CACHE_DIR, DEFAULT_CONFIG_PATH
from imgresize.config.hierarchy import load_config_hierarchy
from imgresize.errors.exceptions import ImgResizeError

console = Console()
error_console = Console(stderr=True)


def _setup_logging(verbosity: int, default_level: str = "WARNING") -> None:
    """Configure logging based on verbosity level."""
    level = logging.getLevelName(default_level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    if verbosity == 1:
        level = min(level, logging.INFO)
    elif verbosity >= 2:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_time=False, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(package_name="imgresize")
def cli() -> None:
    """imgresize — on-demand image resizing with a local disk cache."""


@cli.command()
@click.option(
    "--config", "config_path", type=click.Path(), default=DEFAULT_CONFIG_PATH,
    show_default=True, help="Path to config file.",
)
@click.option("--host", type=str, default=None, help="Bind address (overrides config).")
@click.option("--port", type=int, default=None, help="Server port (overrides config).")
@click.option("--cache-dir", type=click.Path(), default=None, help="Cache directory (overrides config).")
@click.option(
    "--max-cache-files", type=click.IntRange(min=1), default=None,
    help="Maximum number of cache files (overrides config).",
)
@click.option("--project-id", type=str, default=None, help="GCS project ID (overrides config and env).")
@click.option(
    "--credentials-file", type=click.Path(dir_okay=False), default=None,
    help="GCS credentials file (overrides config and GOOGLE_APPLICATION_CREDENTIALS).",
)
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug).")
def serve(
    config_path: str,
    host: str | None,
    port: int | None,
    cache_dir: str | None,
    max_cache_files: int | None,
    project_id: str | None,
    credentials_file: str | None,
    verbose: int,
) -> None:
    """Run the image resize server."""
    from imgresize.core import ImageResizer
    from imgresize.server import run_server

    try:
        config = load_config_hierarchy(
            config_path,
            host=host,
            port=port,
            cache_dir=cache_dir,
            max_cache_files=max_cache_files,
            project_id=project_id,
            credentials_file=credentials_file,
        )
    except ImgResizeError as e:
        error_console.print(f"[red]Error:[/red] {e.message}")
        sys.exit(1)

    _setup_logging(verbose, config.log_level)
    logger = logging.getLogger(__name__)

    try:
        resizer = ImageResizer(config)
    except ImgResizeError as e:
        error_console.print(f"[red]Failed to create server:[/red] {e.message}")
        sys.exit(1)

    logger.info("Starting server on port %d", config.server.port)
    logger.info("Cache directory: %s", config.server.cache_dir)
    logger.info("Max cache files: %d", config.server.max_cache_files)
    run_server(resizer, host=config.server.host, port=config.server.port, log_level=config.log_level)


@cli.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("-s", "--size", "size_spec", required=True, help='Target size, e.g. "300x300" or "300x0".')
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False), help="Output file (.jpg/.jpeg/.png).")
@click.option("--quality", type=click.IntRange(1, 95), default=85, show_default=True, help="JPEG quality.")
def resize(input_path: str, size_spec: str, output: str, quality: int) -> None:
    """Resize a local image file with the server's resize engine."""
    from imgresize.resize.engine import resize_to
    from imgresize.resize.sizes import format_size, parse_size
    from imgresize.utils.image import load_image, save_image

    try:
        dimension = parse_size(size_spec)
        image = load_image(input_path)
        resized = resize_to(image, dimension)
        written = save_image(resized, output, quality=quality)
    except (ImgResizeError, ValueError) as e:
        error_console.print(f"[red]Error:[/red] {getattr(e, 'message', None) or e}")
        sys.exit(1)

    width, height = resized.size
    console.print(
        f"[green]Written to {written}[/green] ({width}x{height}, requested {format_size(dimension)})"
    )


@cli.command("validate-config")
@click.argument("config_yaml", type=click.Path(exists=True, dir_okay=False))
def validate_config(config_yaml: str) -> None:
    """Validate a config YAML file."""
    from imgresize.config.loader import load_config_yaml
    from imgresize.config.schema import validate_catalog

    try:
        config = load_config_yaml(config_yaml)
    except ImgResizeError as e:
        error_console.print(f"[red]Invalid config:[/red] {e.message}")
        sys.exit(1)

    problems = validate_catalog(config)
    if problems:
        for problem in problems:
            error_console.print(f"[red]Invalid config:[/red] {problem}")
        sys.exit(1)

    table = Table(title="Assortments", show_header=True)
    table.add_column("Assortment", style="cyan")
    table.add_column("Size")
    table.add_column("Spec")
    for assortment, sizes in sorted(config.assortments.items()):
        for size_name, spec in sorted(sizes.items()):
            table.add_row(assortment, size_name, spec)

    console.print(f"[green]Valid config:[/green] {len(config.buckets)} bucket aliases")
    for alias, bucket in sorted(config.buckets.items()):
        console.print(f"  {alias} -> {bucket}")
    console.print(table)


@cli.group()
def cache() -> None:
    """Cache management commands."""


_cache_dir_option = click.option(
    "--cache-dir", type=click.Path(file_okay=False), default=DEFAULT_CACHE_DIR,
    show_default=True, help="Cache directory.",
)


@cache.command("stats")
@_cache_dir_option
def cache_stats(cache_dir: str) -> None:
    """Show cache statistics."""
    from imgresize.cache.store import CacheStore

    if not Path(cache_dir).is_dir():
        error_console.print(f"[yellow]No cache directory at {cache_dir}[/yellow]")
        return

    stats = CacheStore(cache_dir, max_files=sys.maxsize, clean_temp_files=False).stats()

    table = Table(title="Cache Statistics", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value")
    table.add_row("Directory", cache_dir)
    table.add_row("Entries", str(stats.entries))
    table.add_row("Size (MB)", f"{stats.size_mb:.1f}")

    console.print(table)


@cache.command("clear")
@_cache_dir_option
@click.confirmation_option(prompt="Are you sure you want to clear the cache?")
def cache_clear(cache_dir: str) -> None:
    """Clear all cached variants."""
    from imgresize.cache.store import CacheStore

    if not Path(cache_dir).is_dir():
        console.print("[green]Cache cleared.[/green] (nothing to remove)")
        return

    count = CacheStore(cache_dir, max_files=sys.maxsize, clean_temp_files=False).clear()
    console.print(f"[green]Cache cleared.[/green] Removed {count} entries.")


def main() -> None:
    """Entry point for the CLI."""
    cli()
