"""GridZen swap puzzle game.

Usage::

    gridzen                      # Rich terminal, interactive menu
    gridzen -f pygame -s 4       # Pygame GUI, 4×4 preselected
    gridzen --scores             # view high scores
    gridzen --reset-scores       # clear every high score
"""

from __future__ import annotations

import importlib
import logging
from enum import StrEnum
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from gridzen.backend.models.highscore import HighScoreManager
from gridzen.backend.models.settings import DEFAULT_SIZE, SUPPORTED_SIZES
from gridzen.backend.storage.store import JsonFileStore

DATA_DIR = Path(typer.get_app_dir("gridzen"))

console = Console()


# -- frontend registry -------------------------------------------------------


class Frontend(StrEnum):
    rich = "rich"
    pygame = "pygame"


_RUNNERS = {
    Frontend.rich: "gridzen.frontend.cli.rich.app",
    Frontend.pygame: "gridzen.frontend.gui.pygame.app",
}


# -- helpers ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _print_highscores(manager: HighScoreManager) -> None:
    sizes = manager.get_all_sizes()

    console.print("\n  === HIGH SCORES ===")
    if not sizes:
        console.print("  No high scores yet.\n")
        return
    for size in sizes:
        console.print(f"\n  --- {size}x{size} ---")
        for i, e in enumerate(manager.get_scores(size), 1):
            console.print(
                f"  {i:>2}. {e.name:<12} {e.moves:>4} moves  "
                f"{e.time_remaining:>4}s left  ({e.date})",
                highlight=False,
            )
    console.print()


# -- CLI entry point ----------------------------------------------------------

app = typer.Typer(add_completion=False)


@app.command()
def main(
    frontend: Frontend = typer.Option(
        Frontend.rich, "-f", "--frontend",
        help="Frontend to launch.",
    ),
    size: int = typer.Option(
        DEFAULT_SIZE, "-s", "--size",
        min=SUPPORTED_SIZES[0], max=SUPPORTED_SIZES[-1],
        help="Grid size preselected in the menu (3-6).",
    ),
    scores: bool = typer.Option(
        False, "--scores",
        help="Show high scores and exit.",
    ),
    reset_scores: bool = typer.Option(
        False, "--reset-scores",
        help="Delete all high scores and exit.",
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir",
        help="Where scores and settings are stored.",
    ),
    verbose: bool = typer.Option(
        False, "-v", "--verbose",
        help="Log debug output to stderr.",
    ),
) -> None:
    """GridZen swap puzzle."""
    _configure_logging(verbose)
    data_dir = data_dir or DATA_DIR

    if reset_scores:
        if not typer.confirm("Delete all high scores? This cannot be undone.", default=False):
            raise typer.Abort()
        HighScoreManager(JsonFileStore(data_dir)).reset()
        console.print("  All high scores have been reset.")
        return

    if scores:
        _print_highscores(HighScoreManager(JsonFileStore(data_dir)))
        return

    mod = importlib.import_module(_RUNNERS[frontend])
    mod.run(size=size, data_dir=data_dir)


if __name__ == "__main__":
    app()
