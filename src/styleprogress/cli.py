"""Command line interface for StyleProgress."""

import asyncio
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from styleprogress import __version__
from styleprogress.config import load_config
from styleprogress.core import format_time
from styleprogress.simulation import simulate_command
from styleprogress.utils.errors import StyleProgressError
from styleprogress.utils.logging import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """StyleProgress - Weighted progress tracking for style analysis runs."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING, console=console)


@cli.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON config file with a stage-weight table",
)
def stages(config_path: Path | None) -> None:
    """Show the stage-weight table and each stage's share of overall progress."""
    try:
        config = load_config(config_path)
    except StyleProgressError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        raise click.Abort()

    total = sum(config.stages.values())

    table = Table(title="Stage Weights")
    table.add_column("Stage", style="cyan")
    table.add_column("Weight", style="green", justify="right")
    table.add_column("Share", style="magenta", justify="right")

    for name, weight in config.stages.items():
        table.add_row(name, f"{weight:g}", f"{weight / total * 100:.1f}%")

    console.print(table)


@cli.command()
@click.option("--repos", type=click.IntRange(1, 1000), default=3, help="Number of repositories to simulate")
@click.option("--files", type=click.IntRange(1, 1000), default=4, help="Files per repository")
@click.option("--delay", type=click.FloatRange(0, 10), default=0.05, help="Seconds of fake work per step")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON config file with a stage-weight table",
)
def demo(repos: int, files: int, delay: float, config_path: Path | None) -> None:
    """
    Simulate a style analysis run with live progress bars.

    Repositories are fetched and analyzed by concurrent asyncio tasks feeding
    one batch operation, so the overall bar shows the weighted aggregate.

    Examples:
      styleprogress demo --repos 5 --files 10
      styleprogress demo --config weights.json
    """
    try:
        asyncio.run(simulate_command(repos, files, config_path, delay=delay, console=console))
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
    except StyleProgressError as e:
        console.print(f"[red]✗[/red] Error: {e}")
        raise click.Abort()


@cli.command("format-time")
@click.argument("milliseconds", type=click.FloatRange(min=0))
def format_time_command(milliseconds: float) -> None:
    """Format a duration in milliseconds the way progress ETAs are shown."""
    console.print(format_time(milliseconds))


if __name__ == "__main__":
    cli()
