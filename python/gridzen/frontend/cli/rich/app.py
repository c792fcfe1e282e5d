"""Rich terminal frontend with styled tables, panels, and a live countdown.

Drives a ``GameSession`` from the keyboard: arrows/WASD move a cursor,
space or Enter taps the tile under it.  The countdown is fed from the
input loop, one ``tick()`` per wall-clock second.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

import rich.box
from rich.align import Align
from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from gridzen.backend.engine.events import EVENT_PLAY_SOUND, EVENT_VALIDATION_FAILED
from gridzen.backend.engine.gamegenerator import hsl_to_rgb
from gridzen.backend.engine.gamestate import GamePhase, GameSession
from gridzen.backend.engine.sound import Sound
from gridzen.backend.models.board import Board
from gridzen.backend.models.highscore import HighScoreManager
from gridzen.backend.models.settings import DEFAULT_SIZE, SUPPORTED_SIZES, SessionConfig
from gridzen.backend.storage.store import JsonFileStore
from gridzen.frontend.cli.input_handler import Key, read_key

logger = logging.getLogger(__name__)

console = Console()

_THEMES: dict[bool, dict[str, str]] = {
    False: {"border": "bright_blue", "accent": "cyan", "dim": "dim", "title": "bold"},
    True: {"border": "grey50", "accent": "magenta", "dim": "grey42", "title": "bold white"},
}


class BellSoundPlayer:
    """Rings the terminal bell for every cue."""

    def play(self, sound: Sound) -> None:
        console.bell()


# -- helpers ------------------------------------------------------------------


def _format_time(seconds: int) -> str:
    m, s = divmod(seconds, 60)
    return f"{m:02d}:{s:02d}"


def _hex(color: str) -> str:
    r, g, b = hsl_to_rgb(color)
    return f"#{r:02x}{g:02x}{b:02x}"


# -- board rendering ----------------------------------------------------------


def _render_board(
    board: Board,
    selection: tuple[int, int] | None,
    cursor: tuple[int, int],
    border: str,
) -> Table:
    """Return a Rich Table with each tile painted in its own color."""
    width = len(str(board.size * board.size))
    table = Table(
        show_header=False,
        show_edge=True,
        pad_edge=True,
        box=rich.box.HEAVY,
        border_style=border,
        padding=(0, 0),
    )
    for _ in range(board.size):
        table.add_column(width=width + 4, justify="center")

    for r, row in enumerate(board.tiles):
        cells: list[Text] = []
        for c, tile in enumerate(row):
            left, right = ("[", "]") if (r, c) == cursor else (" ", " ")
            style = f"bold black on {_hex(tile.color)}"
            if (r, c) == selection:
                style += " reverse"
            cells.append(Text(f"{left}{tile.number:>{width}}{right}", style=style))
        table.add_row(*cells)

    return table


class RichApp:
    """Keyboard loop around a single ``GameSession``."""

    def __init__(self, session: GameSession, initial_size: int = DEFAULT_SIZE) -> None:
        self.session = session
        self.initial_size = initial_size
        self.cursor: tuple[int, int] = (0, 0)
        self.status = ""
        session.bus.subscribe(EVENT_VALIDATION_FAILED, self._on_validation_failed)
        session.bus.subscribe(EVENT_PLAY_SOUND, self._on_sound)

    @property
    def theme(self) -> dict[str, str]:
        return _THEMES[self.session.settings.dark_mode]

    # -- signal handlers ------------------------------------------------------

    def _on_validation_failed(self, sender, field: str, message: str) -> None:
        self.status = f"[red]{message}[/red]"

    def _on_sound(self, sender, sound: Sound) -> None:
        logger.debug("Sound cue: %s", sound)

    # -- screens --------------------------------------------------------------

    def _draw_splash(self) -> None:
        console.clear()
        title = Text("G R I D Z E N", style="bold magenta", justify="center")
        tagline = Text("Sort the colors before the clock runs out.", style="dim")
        console.print("\n\n")
        console.print(Align.center(Panel(Group(title, Align.center(tagline)), padding=(2, 6))))
        console.print(Align.center(Text("Press any key", style="dim")))

    def _draw_menu(self) -> None:
        console.clear()
        theme = self.theme
        settings = self.session.settings

        sizes = Text()
        for s in SUPPORTED_SIZES:
            if s > SUPPORTED_SIZES[0]:
                sizes.append("  ")
            if s == self.session.grid_size:
                sizes.append(f" {s}×{s} ", style="bold green on #313244")
            else:
                sizes.append(f" {s}×{s} ", style=theme["dim"])

        player = Text()
        player.append("Player: ", style=theme["dim"])
        player.append(settings.player_name or "(none)", style="bold yellow")

        toggles = Text()
        toggles.append("Dark mode: ", style=theme["dim"])
        toggles.append("on" if settings.dark_mode else "off", style="bold")
        toggles.append("    Sound: ", style=theme["dim"])
        toggles.append("on" if settings.sound_on else "off", style="bold")

        opts = Text()
        for key, label in (("1", "Play"), ("2", "Name"), ("3", "Scores"),
                           ("4", "Dark"), ("5", "Sound"), ("Q", "Quit")):
            opts.append(f"  {key}", style=f"bold {theme['accent']}")
            opts.append(f" {label}  ")

        body = [
            Text(""),
            Align.center(sizes),
            Align.center(Text("← →  change size", style=theme["dim"])),
            Text(""),
            Align.center(player),
            Align.center(toggles),
            Text(""),
            Align.center(opts),
        ]
        if self.status:
            body.append(Align.center(Text.from_markup(self.status)))

        console.print()
        console.print(
            Align.center(
                Panel(
                    Group(*body),
                    title=f"[{theme['title']}]G R I D Z E N[/]",
                    border_style=theme["border"],
                    padding=(1, 4),
                )
            )
        )

    def _draw_game(self) -> None:
        console.clear()
        session = self.session
        theme = self.theme
        board = session.board
        assert board is not None

        stats = Text()
        stats.append("Moves: ", style=theme["dim"])
        stats.append(str(session.moves), style="bold yellow")
        stats.append("    Time: ", style=theme["dim"])
        time_style = "bold red" if session.time_left <= 10 else "bold yellow"
        stats.append(_format_time(session.time_left), style=time_style)

        controls = Text()
        controls.append("↑↓←→", style=f"bold {theme['accent']}")
        controls.append(" / ", style=theme["dim"])
        controls.append("WASD", style=f"bold {theme['accent']}")
        controls.append("  cursor   ", style=theme["dim"])
        controls.append("Space", style=f"bold {theme['accent']}")
        controls.append("  tap   ", style=theme["dim"])
        controls.append("G", style=f"bold {theme['accent']}")
        controls.append("  give up", style=theme["dim"])

        size = board.size
        panel = Panel(
            Align.center(_render_board(board, session.selection, self.cursor, theme["border"])),
            title=f"[bold {theme['accent']}]GridZen  {size}×{size}[/]",
            subtitle=session.config.player_name if session.config else None,
            border_style=theme["border"],
            padding=(1, 2),
        )
        console.print()
        console.print(Align.center(panel))
        console.print(Align.center(stats))
        console.print(Align.center(controls))

    def _draw_result(self) -> None:
        console.clear()
        session = self.session
        if session.phase == GamePhase.WON:
            result = session.last_result
            assert result is not None
            headline = Text("★ CONGRATULATIONS! ★", style="bold green")
            detail = Text(
                f"You won in {result.moves} moves with "
                f"{result.time_remaining} seconds remaining!",
                style="green",
            )
            border = "bold green"
        else:
            headline = Text("TIME'S UP!", style="bold red")
            detail = Text("You ran out of time. Try again!", style="red")
            border = "bold red"

        console.print()
        console.print(
            Align.center(
                Panel(
                    Group(Align.center(headline), Text(""), Align.center(detail)),
                    border_style=border,
                    padding=(1, 4),
                )
            )
        )
        console.print(Align.center(Text("\nPress any key to return to the menu.\n", style="dim")))

    def _draw_highscores(self) -> None:
        console.clear()
        theme = self.theme
        manager: HighScoreManager = self.session.scores
        parts: list[Align] = []

        for size in SUPPORTED_SIZES:
            scores = manager.get_scores(size)
            if not scores:
                continue
            hs_table = Table(
                title=f"{size}×{size}",
                title_style=f"bold {theme['accent']}",
                box=rich.box.ROUNDED,
                border_style=theme["dim"],
            )
            hs_table.add_column("#", justify="right", style="dim", width=3)
            hs_table.add_column("Name")
            hs_table.add_column("Moves", justify="right", style="yellow")
            hs_table.add_column("Left", justify="right", style="yellow")
            hs_table.add_column("Date", style="dim")
            for i, e in enumerate(scores, 1):
                hs_table.add_row(str(i), e.name, str(e.moves), f"{e.time_remaining}s", e.date)
            parts.append(Align.center(hs_table))

        if not parts:
            parts.append(Align.center(Text("No high scores yet.", style="dim")))

        console.print()
        console.print(
            Align.center(
                Panel(
                    Group(*parts),
                    title="[bold]HIGH  SCORES[/bold]",
                    border_style=theme["border"],
                    padding=(1, 2),
                )
            )
        )
        console.print(Align.center(Text("\nX reset all scores   any other key to go back\n", style="dim")))

    # -- loops ----------------------------------------------------------------

    def _splash_loop(self) -> None:
        while self.session.phase == GamePhase.SPLASH:
            self._draw_splash()
            if read_key(1.0) is not None:
                self.session.skip_splash()
            else:
                self.session.tick()

    def _ask_name(self) -> None:
        console.clear()
        name = Prompt.ask("Your name", default=self.session.settings.player_name or None)
        if name and name.strip():
            self.session.set_player_name(name.strip())
            self.status = ""

    def _scores_screen(self) -> None:
        self._draw_highscores()
        if read_key() == "x":
            console.clear()
            if Confirm.ask(
                "Delete all high scores? This action cannot be undone.", default=False
            ):
                self.session.reset_high_scores()
                self.status = "[green]All high scores have been reset.[/green]"

    def _play_loop(self) -> None:
        session = self.session
        self.cursor = (0, 0)
        next_tick = time.monotonic() + 1
        dirty = True

        while session.phase == GamePhase.PLAYING:
            if dirty:
                self._draw_game()
                dirty = False

            key = read_key(max(0.0, min(0.25, next_tick - time.monotonic())))
            if time.monotonic() >= next_tick:
                session.tick()
                next_tick += 1
                dirty = True
            if key is None:
                continue

            size = session.grid_size
            r, c = self.cursor
            dirty = True
            if key == Key.UP:
                self.cursor = (max(0, r - 1), c)
            elif key == Key.DOWN:
                self.cursor = (min(size - 1, r + 1), c)
            elif key == Key.LEFT:
                self.cursor = (r, max(0, c - 1))
            elif key == Key.RIGHT:
                self.cursor = (r, min(size - 1, c + 1))
            elif key == Key.TAP:
                session.select_tile(r, c)
            elif key in (Key.GIVE_UP, Key.QUIT):
                session.give_up()

    def run(self) -> None:
        session = self.session
        self._splash_loop()
        # Grid size can only change once the menu is up.
        session.set_grid_size(self.initial_size)

        while True:
            if session.phase in (GamePhase.WON, GamePhase.GAME_OVER):
                self._draw_result()
                read_key()
                session.acknowledge()
                continue

            self._draw_menu()
            key = read_key()
            self.status = ""

            if key == Key.QUIT:
                console.clear()
                console.print(Align.center(Text("\nGoodbye!\n", style="bold cyan")))
                return
            elif key == Key.LEFT:
                index = SUPPORTED_SIZES.index(session.grid_size)
                session.set_grid_size(SUPPORTED_SIZES[max(0, index - 1)])
            elif key == Key.RIGHT:
                index = SUPPORTED_SIZES.index(session.grid_size)
                session.set_grid_size(SUPPORTED_SIZES[min(len(SUPPORTED_SIZES) - 1, index + 1)])
            elif key in ("1", Key.TAP):
                config = SessionConfig(session.grid_size, session.settings.player_name)
                if session.start_game(config):
                    self._play_loop()
            elif key == "2":
                self._ask_name()
            elif key == "3":
                self._scores_screen()
            elif key == "4":
                session.set_dark_mode(not session.settings.dark_mode)
            elif key == "5":
                session.set_sound_on(not session.settings.sound_on)


# -- public entry point -------------------------------------------------------


def run(size: int = 3, data_dir: Path = Path("data")) -> None:
    """Launch the Rich frontend with its splash screen and menu."""
    session = GameSession(JsonFileStore(data_dir), sound_player=BellSoundPlayer())
    RichApp(session, initial_size=size).run()
