"""Typer entry-point wiring for the Scoundrel CLI."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from .. import benchmark
from .textual import run_textual_app

app = typer.Typer(add_completion=False, rich_markup_mode="rich")
console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Path | None, verbose: bool) -> None:
    """Send log records to ``log_file``; the terminal belongs to the UI."""

    if log_file is None:
        logging.getLogger("scoundrel").addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=str(log_file),
        filemode="w",
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
    )


@app.callback()
def main_options(
    log_file: Path | None = typer.Option(None, "--log-file", help="Write engine logs to this file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every rule transition (DEBUG level)."),
) -> None:
    """Scoundrel: a single-player dungeon crawl played with a deck of cards."""

    configure_logging(log_file, verbose)


@app.command()
def play(
    seed: int | None = typer.Option(None, help="Random seed for reproducible games (omit for randomness)."),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Reveal the dungeon order and extra statistics.",
    ),
) -> None:
    """Play interactively in the terminal."""

    run_textual_app(seed=seed, debug=debug)


@app.command("simulate")
def simulate_cli(
    games: int = typer.Option(100, min=1, help="Number of games for the autoplayer."),
    seed: int = typer.Option(123, help="Random seed for the simulation."),
) -> None:
    """Let the heuristic autoplayer run a batch of games."""

    report = benchmark.run_simulation(games=games, seed=seed)
    totals = report.history.totals()

    table = Table(title="Autoplayer Simulation", box=box.SIMPLE_HEAVY)
    table.add_column("Metric", justify="left")
    table.add_column("Value", justify="right")
    table.add_row("Games", str(totals.runs))
    table.add_row("Cleared", f"{totals.clears} ({report.clear_rate:.0%})")
    table.add_row("Best score", str(totals.best_score))
    table.add_row("Worst score", str(totals.worst_score))
    table.add_row("Mean score", f"{report.mean_score:.2f}")
    table.add_row("Std dev", f"{report.std_score:.2f}")
    table.add_row("Median score", f"{report.median_score:.1f}")

    console.print(table)


def main() -> None:
    """Entry-point for ``python -m scoundrel.cli``."""

    app()


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    main()
