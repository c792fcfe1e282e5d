"""Pygame GUI frontend, fully self-contained.

Splash, menu with name entry and size selection, gameplay with a
countdown, result screens, and high scores.  The one-second countdown
comes from a pygame timer event that is armed only while the session is
in a timed phase.
"""

from __future__ import annotations

import logging
import math
from array import array
from pathlib import Path

import pygame

from gridzen.backend.engine.events import (
    EVENT_PHASE_CHANGED,
    EVENT_VALIDATION_FAILED,
)
from gridzen.backend.engine.gamegenerator import hsl_to_rgb
from gridzen.backend.engine.gamestate import GamePhase, GameSession
from gridzen.backend.engine.sound import Sound
from gridzen.backend.models.settings import SUPPORTED_SIZES, SessionConfig
from gridzen.backend.storage.store import JsonFileStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Palettes (Catppuccin Latte / Mocha)
# ---------------------------------------------------------------------------
_LIGHT = {
    "base": (239, 241, 245),
    "mantle": (230, 233, 239),
    "surface0": (204, 208, 218),
    "surface1": (188, 192, 204),
    "overlay": (140, 143, 161),
    "text": (76, 79, 105),
    "subtext": (92, 95, 119),
}
_DARK = {
    "base": (30, 30, 46),
    "mantle": (24, 24, 37),
    "surface0": (49, 50, 68),
    "surface1": (69, 71, 90),
    "overlay": (108, 112, 134),
    "text": (205, 214, 244),
    "subtext": (166, 173, 200),
}
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)
COL_DARK_TEXT = (30, 30, 46)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 500, 640
TILE_GAP = 6
MARGIN = 20
BOARD_TOP = 90
BOARD_MAX = WIN_W - 2 * MARGIN

TICK_EVENT = pygame.USEREVENT + 1
MAX_NAME = 20

SOUND_FILES = {
    Sound.VICTORY: "Cheer.mp3",
    Sound.GAME_OVER: "Game_over.mp3",
}

# (frequency Hz, duration s) notes synthesised when no sound file is present
TONES = {
    Sound.VICTORY: [(523.25, 0.12), (659.25, 0.12), (783.99, 0.12), (1046.5, 0.3)],
    Sound.GAME_OVER: [(392.0, 0.2), (311.13, 0.2), (261.63, 0.45)],
}
MIXER_RATE = 22050


def _tone_buffer(notes: list[tuple[float, float]], rate: int, channels: int) -> bytes:
    """Signed 16-bit PCM for *notes*, each faded out to avoid clicks."""
    samples = array("h")
    for freq, seconds in notes:
        count = int(rate * seconds)
        for i in range(count):
            fade = 1.0 - i / count
            value = int(12000 * fade * math.sin(2 * math.pi * freq * i / rate))
            samples.extend([value] * channels)
    return samples.tobytes()


# ---------------------------------------------------------------------------
# Sound
# ---------------------------------------------------------------------------
class PygameSoundPlayer:
    """Plays cues through ``pygame.mixer``.

    A cue uses ``<sounds_dir>/<file>`` when it exists and a synthesised
    tone sequence otherwise.  Without an audio device every cue is silent.
    """

    def __init__(self, sounds_dir: Path | None = None) -> None:
        self._sounds: dict[Sound, pygame.mixer.Sound] = {}
        try:
            pygame.mixer.init(frequency=MIXER_RATE, size=-16, channels=1)
        except pygame.error:
            logger.warning("No audio device; sounds disabled", exc_info=True)
            return
        for sound in Sound:
            clip = self._load_file(sounds_dir, sound)
            if clip is None:
                clip = self._synthesise(sound)
            if clip is not None:
                self._sounds[sound] = clip

    @staticmethod
    def _load_file(sounds_dir: Path | None, sound: Sound) -> pygame.mixer.Sound | None:
        if sounds_dir is None:
            return None
        path = sounds_dir / SOUND_FILES[sound]
        if not path.exists():
            return None
        try:
            return pygame.mixer.Sound(str(path))
        except pygame.error:
            logger.warning("Could not load %s", path, exc_info=True)
            return None

    @staticmethod
    def _synthesise(sound: Sound) -> pygame.mixer.Sound | None:
        rate, fmt, channels = pygame.mixer.get_init()
        if fmt != -16:
            logger.info("Mixer format %s unsupported for tones; %s is silent", fmt, sound)
            return None
        return pygame.mixer.Sound(buffer=_tone_buffer(TONES[sound], rate, channels))

    def play(self, sound: Sound) -> None:
        clip = self._sounds.get(sound)
        if clip is not None:
            clip.play()


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple | None = None,
        hover: tuple | None = None,
        fg: tuple | None = None,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface, palette: dict[str, tuple]) -> None:
        bg = self.bg or palette["surface0"]
        hover = self.hover or palette["surface1"]
        pygame.draw.rect(surf, hover if self._hot else bg, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg or palette["text"])
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, session: GameSession, initial_size: int) -> None:
        self._session = session
        self._initial_size = initial_size
        self._name = session.settings.player_name
        self._status_msg = ""
        self._show_scores = False
        self._scores_size = initial_size

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("GridZen")
        self._clock = pygame.time.Clock()

        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)

        session.bus.subscribe(EVENT_PHASE_CHANGED, self._on_phase_changed)
        session.bus.subscribe(EVENT_VALIDATION_FAILED, self._on_validation_failed)

        self._build_menu_btns()
        self._build_game_btns()
        self._build_result_btns()
        self._build_score_btns()
        self._arm_timer(session.phase)

    @property
    def _pal(self) -> dict[str, tuple]:
        return _DARK if self._session.settings.dark_mode else _LIGHT

    # ── timer ───────────────────────────────────────────────────────────────

    @staticmethod
    def _arm_timer(phase: GamePhase) -> None:
        timed = phase in (GamePhase.SPLASH, GamePhase.PLAYING)
        pygame.time.set_timer(TICK_EVENT, 1000 if timed else 0)

    def _on_phase_changed(self, sender, phase: GamePhase, previous: GamePhase) -> None:
        self._arm_timer(phase)
        if phase == GamePhase.MENU and previous == GamePhase.SPLASH:
            self._session.set_grid_size(self._initial_size)

    def _on_validation_failed(self, sender, field: str, message: str) -> None:
        self._status_msg = message

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        bw, bh, gap = 90, 42, 10
        total_w = len(SUPPORTED_SIZES) * bw + (len(SUPPORTED_SIZES) - 1) * gap
        sx = _cx(total_w)
        self._size_btns: dict[int, _Btn] = {
            s: _Btn((sx + i * (bw + gap), 280, bw, bh), f"{s}×{s}", self._f_btn_sm)
            for i, s in enumerate(SUPPORTED_SIZES)
        }

        bw_lg = 220
        self._play_btn = _Btn(
            (_cx(bw_lg), 350, bw_lg, 50), "P L A Y", self._f_btn,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_DARK_TEXT,
        )
        self._hs_btn = _Btn((_cx(bw_lg), 414, bw_lg, 42), "HIGH SCORES", self._f_btn_sm)
        half = (bw_lg - gap) // 2
        self._dark_btn = _Btn((_cx(bw_lg), 470, half, 38), "", self._f_btn_sm)
        self._sound_btn = _Btn((_cx(bw_lg) + half + gap, 470, half, 38), "", self._f_btn_sm)
        self._quit_btn = _Btn(
            (_cx(bw_lg), 522, bw_lg, 42), "Q U I T", self._f_btn_sm,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_DARK_TEXT,
        )
        self._menu_all: list[_Btn] = [
            *self._size_btns.values(),
            self._play_btn,
            self._hs_btn,
            self._dark_btn,
            self._sound_btn,
            self._quit_btn,
        ]

    def _build_game_btns(self) -> None:
        self._giveup_btn = _Btn(
            (_cx(140), WIN_H - 70, 140, 40), "GIVE UP", self._f_btn_sm,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_DARK_TEXT,
        )

    def _build_result_btns(self) -> None:
        self._ok_btn = _Btn(
            (_cx(180), 420, 180, 50), "O K", self._f_btn,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_DARK_TEXT,
        )

    def _build_score_btns(self) -> None:
        bw, gap = 70, 8
        total_w = len(SUPPORTED_SIZES) * bw + (len(SUPPORTED_SIZES) - 1) * gap
        sx = _cx(total_w)
        self._score_tabs: dict[int, _Btn] = {
            s: _Btn((sx + i * (bw + gap), 84, bw, 34), f"{s}x{s}", self._f_btn_sm)
            for i, s in enumerate(SUPPORTED_SIZES)
        }
        self._reset_btn = _Btn(
            (_cx(200), WIN_H - 124, 200, 42), "RESET ALL SCORES", self._f_btn_sm,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_DARK_TEXT,
        )
        self._score_back = _Btn((_cx(180), WIN_H - 70, 180, 42), "C L O S E", self._f_btn_sm)

    # ── layout helpers ──────────────────────────────────────────────────────

    def _tile_layout(self) -> tuple[int, int, int, int]:
        """Return (tile_px, origin_x, origin_y, total_px) for current game."""
        sz = self._session.grid_size
        tile_px = (BOARD_MAX - (sz + 1) * TILE_GAP) // sz
        total = sz * tile_px + (sz + 1) * TILE_GAP
        return tile_px, _cx(total) + TILE_GAP, BOARD_TOP + TILE_GAP, total

    @staticmethod
    def _tile_rect(r: int, c: int, tpx: int, ox: int, oy: int) -> pygame.Rect:
        return pygame.Rect(ox + c * (tpx + TILE_GAP), oy + r * (tpx + TILE_GAP), tpx, tpx)

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_splash(self) -> None:
        pal = self._pal
        self._surf.fill(pal["base"])
        _blit_center(self._surf, self._f_big.render("G R I D Z E N", True, pal["text"]), 240)
        _blit_center(
            self._surf,
            self._f_body.render("Sort the colors before the clock runs out.", True, pal["subtext"]),
            300,
        )

    def _draw_menu(self) -> None:
        pal = self._pal
        settings = self._session.settings
        self._surf.fill(pal["base"])
        _blit_center(self._surf, self._f_big.render("GridZen", True, pal["text"]), 60)

        _blit_center(self._surf, self._f_body.render("Your name", True, pal["subtext"]), 140)
        box = pygame.Rect(_cx(260), 166, 260, 40)
        pygame.draw.rect(self._surf, pal["mantle"], box, border_radius=8)
        pygame.draw.rect(self._surf, COL_BLUE, box, width=2, border_radius=8)
        name = self._f_title.render(self._name + "|", True, pal["text"])
        self._surf.blit(name, (box.x + 10, box.centery - name.get_height() // 2))

        if self._status_msg:
            _blit_center(self._surf, self._f_small.render(self._status_msg, True, COL_RED), 214)

        _blit_center(self._surf, self._f_body.render("Grid size", True, pal["subtext"]), 250)
        for s, btn in self._size_btns.items():
            selected = s == self._session.grid_size
            btn.bg = COL_GREEN if selected else None
            btn.fg = COL_DARK_TEXT if selected else None
        self._dark_btn.text = f"DARK: {'ON' if settings.dark_mode else 'OFF'}"
        self._sound_btn.text = f"SOUND: {'ON' if settings.sound_on else 'OFF'}"
        for btn in self._menu_all:
            btn.draw(self._surf, pal)

    def _draw_game(self) -> None:
        pal = self._pal
        session = self._session
        board = session.board
        assert board is not None
        self._surf.fill(pal["base"])
        tpx, ox, oy, total = self._tile_layout()
        f_tile = pygame.font.SysFont("Helvetica", max(14, tpx // 3), bold=True)

        sz = board.size
        _blit_center(
            self._surf,
            self._f_title.render(f"GridZen  {sz}×{sz}", True, pal["text"]),
            14,
        )
        time_col = COL_RED if session.time_left <= 10 else COL_YELLOW
        m, s = divmod(session.time_left, 60)
        _blit_center(
            self._surf,
            self._f_body.render(f"Moves: {session.moves}    Time: {m:02d}:{s:02d}", True, time_col),
            48,
        )

        pygame.draw.rect(
            self._surf, pal["mantle"], pygame.Rect(_cx(total), BOARD_TOP, total, total),
            border_radius=10,
        )
        for r in range(sz):
            for c in range(sz):
                tile = board.tiles[r][c]
                rect = self._tile_rect(r, c, tpx, ox, oy)
                pygame.draw.rect(self._surf, hsl_to_rgb(tile.color), rect, border_radius=6)
                if session.selection == (r, c):
                    pygame.draw.rect(self._surf, (76, 175, 80), rect.inflate(6, 6), width=4, border_radius=8)
                lbl = f_tile.render(str(tile.number), True, COL_DARK_TEXT)
                self._surf.blit(
                    lbl,
                    (rect.centerx - lbl.get_width() // 2, rect.centery - lbl.get_height() // 2),
                )

        self._giveup_btn.draw(self._surf, pal)

    def _draw_result(self) -> None:
        pal = self._pal
        session = self._session
        self._surf.fill(pal["base"])
        if session.phase == GamePhase.WON:
            result = session.last_result
            assert result is not None
            _blit_center(self._surf, self._f_big.render("★  S O L V E D  ★", True, COL_GREEN), 120)
            lines = [
                (f"Moves:  {result.moves}", COL_YELLOW),
                (f"Time left:  {result.time_remaining}s", COL_YELLOW),
            ]
        else:
            _blit_center(self._surf, self._f_big.render("TIME'S  UP", True, COL_RED), 120)
            lines = [("You ran out of time. Try again!", pal["subtext"])]
        y = 220
        for txt, col in lines:
            _blit_center(self._surf, self._f_title.render(txt, True, col), y)
            y += 44
        self._ok_btn.draw(self._surf, pal)

    def _draw_scores(self) -> None:
        pal = self._pal
        self._surf.fill(pal["base"])
        _blit_center(self._surf, self._f_big.render("HIGH  SCORES", True, pal["text"]), 24)

        for s, btn in self._score_tabs.items():
            btn.bg = COL_BLUE if s == self._scores_size else None
            btn.fg = COL_DARK_TEXT if s == self._scores_size else None
            btn.draw(self._surf, pal)

        y = 140
        entries = self._session.scores.get_scores(self._scores_size)
        if not entries:
            _blit_center(
                self._surf,
                self._f_body.render(
                    f"No high scores yet for {self._scores_size}x{self._scores_size}",
                    True, pal["overlay"],
                ),
                y + 30,
            )
        for i, e in enumerate(entries, 1):
            self._surf.blit(self._f_title.render(f"#{i}  {e.name}", True, pal["text"]), (60, y))
            detail = f"{e.moves} moves • {e.time_remaining}s left   {e.date}"
            self._surf.blit(self._f_small.render(detail, True, pal["subtext"]), (60, y + 28))
            y += 62

        self._reset_btn.draw(self._surf, pal)
        self._score_back.draw(self._surf, pal)

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        session = self._session
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for s, b in self._size_btns.items():
                if b.hit(ev.pos):
                    session.set_grid_size(s)
                    return True
            if self._play_btn.hit(ev.pos):
                self._start_game()
            elif self._hs_btn.hit(ev.pos):
                self._scores_size = session.grid_size
                self._show_scores = True
            elif self._dark_btn.hit(ev.pos):
                session.set_dark_mode(not session.settings.dark_mode)
            elif self._sound_btn.hit(ev.pos):
                session.set_sound_on(not session.settings.sound_on)
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key == pygame.K_RETURN:
                self._start_game()
            elif ev.key == pygame.K_ESCAPE:
                return False
            elif ev.key == pygame.K_BACKSPACE:
                self._name = self._name[:-1]
            elif ev.unicode and ev.unicode.isprintable() and len(self._name) < MAX_NAME:
                self._name += ev.unicode
                self._status_msg = ""
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        session = self._session
        if ev.type == pygame.MOUSEMOTION:
            self._giveup_btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._giveup_btn.hit(ev.pos):
                session.give_up()
                return True
            tpx, ox, oy, _ = self._tile_layout()
            for r in range(session.grid_size):
                for c in range(session.grid_size):
                    if self._tile_rect(r, c, tpx, ox, oy).collidepoint(ev.pos):
                        session.select_tile(r, c)
                        return True
        elif ev.type == pygame.KEYDOWN and ev.key == pygame.K_ESCAPE:
            session.give_up()
        return True

    def _ev_result(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._ok_btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._ok_btn.hit(ev.pos):
                self._session.acknowledge()
        elif ev.type == pygame.KEYDOWN and ev.key in (pygame.K_RETURN, pygame.K_ESCAPE):
            self._session.acknowledge()
        return True

    def _ev_scores(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in (self._reset_btn, self._score_back, *self._score_tabs.values()):
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            for s, b in self._score_tabs.items():
                if b.hit(ev.pos):
                    self._scores_size = s
                    return True
            if self._reset_btn.hit(ev.pos):
                self._session.reset_high_scores()
            elif self._score_back.hit(ev.pos):
                self._show_scores = False
        elif ev.type == pygame.KEYDOWN and ev.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._show_scores = False
        return True

    def _ev_splash(self, ev: pygame.event.Event) -> bool:
        if ev.type in (pygame.MOUSEBUTTONDOWN, pygame.KEYDOWN):
            self._session.skip_splash()
        return True

    # ── game state ──────────────────────────────────────────────────────────

    def _start_game(self) -> None:
        self._status_msg = ""
        self._session.start_game(SessionConfig(self._session.grid_size, self._name))

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        running = True
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                if ev.type == TICK_EVENT:
                    self._session.tick()
                    continue
                handler = self._current()[0]
                if not handler(ev):
                    running = False
                    break

            self._current()[1]()
            pygame.display.flip()
            self._clock.tick(30)

        pygame.time.set_timer(TICK_EVENT, 0)
        pygame.quit()

    def _current(self):
        phase = self._session.phase
        if phase == GamePhase.MENU:
            if self._show_scores:
                return self._ev_scores, self._draw_scores
            return self._ev_menu, self._draw_menu
        return {
            GamePhase.SPLASH: (self._ev_splash, self._draw_splash),
            GamePhase.PLAYING: (self._ev_game, self._draw_game),
            GamePhase.WON: (self._ev_result, self._draw_result),
            GamePhase.GAME_OVER: (self._ev_result, self._draw_result),
        }[phase]


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def run(size: int = 3, data_dir: Path = Path("data")) -> None:
    """Launch the Pygame GUI (opens on the splash screen)."""
    session = GameSession(
        JsonFileStore(data_dir),
        sound_player=PygameSoundPlayer(data_dir / "sounds"),
    )
    PygameApp(session, size).run_loop()
