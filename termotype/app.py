"""Pygame UI shell for termotype.

Screens:
- Typing Test (live WPM/accuracy, coloured per-character feedback)
- Stats (personal best per mode)
- Options (test mode presets)

Deterministic timing/scoring/state lives in termotype/* (core modules); this
module only translates pygame events into keystrokes and draws snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

import pygame

from .clock import RealClock
from .errors import ConfigurationError
from .input_tracker import CharState, WordProgress
from .profile import ProfileStore
from .settings import MODE_PRESETS, Settings
from .typing_core import (
    BACKSPACE,
    SPACE,
    SessionResult,
    Status,
    TestMode,
    TimeBound,
    TypingSnapshot,
    TypingTest,
)
from .words import RandomWordSource, load_words

logger = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

BG = (3, 9, 78)
PANEL_BG = (8, 18, 104)
HEADER_BG = (18, 30, 118)
BORDER = (226, 236, 255)
TEXT_MAIN = (238, 245, 255)
TEXT_MUTED = (186, 200, 224)
STATE_COLOURS: dict[CharState, tuple[int, int, int]] = {
    CharState.UNTYPED: (120, 134, 176),
    CharState.CORRECT: (132, 226, 150),
    CharState.INCORRECT: (255, 110, 110),
}


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


@dataclass(frozen=True, slots=True)
class MenuItem:
    label: str
    action: Callable[[], None]


@dataclass(slots=True)
class Preferences:
    """Choices made on the Options screen; read when a test is opened."""

    mode: TestMode


class App:
    def __init__(self, surface: pygame.Surface) -> None:
        self._surface = surface
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def pop(self) -> None:
        # Never pop the last/root screen; root handles its own quit/back behavior.
        if len(self._screens) > 1:
            self._screens.pop()

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


def _draw_frame(surface: pygame.Surface, font: pygame.font.Font, title: str, tag: str) -> pygame.Rect:
    """Panel + header shared by every screen. Returns the content rect."""

    w, h = surface.get_size()
    surface.fill(BG)
    margin = max(10, min(26, w // 34))
    frame = pygame.Rect(margin, margin, max(260, w - margin * 2), max(220, h - margin * 2))
    pygame.draw.rect(surface, PANEL_BG, frame)
    pygame.draw.rect(surface, BORDER, frame, 2)

    header_h = max(34, min(52, h // 8))
    header = pygame.Rect(frame.x + 2, frame.y + 2, frame.w - 4, header_h)
    pygame.draw.rect(surface, HEADER_BG, header)
    pygame.draw.line(surface, BORDER, (header.x, header.bottom), (header.right, header.bottom), 1)

    tag_font = pygame.font.Font(None, 22)
    tag_img = tag_font.render(tag, True, TEXT_MUTED)
    surface.blit(tag_img, (header.x + 12, header.y + (header.h - tag_img.get_height()) // 2))
    title_img = font.render(title, True, TEXT_MAIN)
    surface.blit(title_img, title_img.get_rect(center=(frame.centerx, header.centery)))

    return pygame.Rect(frame.x + 16, header.bottom + 14, frame.w - 32, frame.bottom - header.bottom - 28)


class MenuScreen:
    def __init__(self, app: App, title: str, items: list[MenuItem], *, is_root: bool = False) -> None:
        self._app = app
        self._title = title
        self._items = items
        self._selected = 0
        self._is_root = is_root
        self._title_font = pygame.font.Font(None, 42)
        self._item_font = pygame.font.Font(None, 32)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        if key in (pygame.K_UP, pygame.K_w):
            self._move(-1)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self._move(1)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE):
            self._activate()
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._back()

    def _move(self, delta: int) -> None:
        if not self._items:
            return
        self._selected = (self._selected + delta) % len(self._items)

    def _activate(self) -> None:
        if not self._items:
            return
        self._items[self._selected].action()

    def _back(self) -> None:
        if self._is_root:
            self._app.quit()
        else:
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        content = _draw_frame(surface, self._title_font, self._title, "MENU")

        row_h = 40
        gap = 8
        total_h = len(self._items) * (row_h + gap)
        y = content.y + max(8, (content.h - total_h) // 2)
        for idx, item in enumerate(self._items):
            row = pygame.Rect(content.x + 12, y, content.w - 24, row_h)
            selected = idx == self._selected
            if selected:
                pygame.draw.rect(surface, (244, 248, 255), row)
                pygame.draw.rect(surface, (120, 142, 196), row, 2)
            else:
                pygame.draw.rect(surface, (9, 20, 106), row)
                pygame.draw.rect(surface, (62, 84, 152), row, 1)
            color = (14, 26, 74) if selected else TEXT_MAIN
            text = self._item_font.render(item.label, True, color)
            surface.blit(text, (row.x + 10, row.y + (row.h - text.get_height()) // 2))
            y += row_h + gap

        foot = self._hint_font.render("Enter/Space: Select  |  Esc/Backspace: Back", True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 8)))


class TypingTestScreen:
    """Runs one TypingTest; records finished sessions to the profile store."""

    def __init__(self, app: App, *, engine: TypingTest, profiles: ProfileStore) -> None:
        self._app = app
        self._engine = engine
        self._profiles = profiles
        self._last_result: SessionResult | None = None
        self._new_best = False

        self._title_font = pygame.font.Font(None, 42)
        self._word_font = pygame.font.Font(None, 40)
        self._stat_font = pygame.font.Font(None, 30)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type != pygame.KEYDOWN:
            return
        key = event.key
        if key == pygame.K_ESCAPE:
            self._app.pop()
            return
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_TAB):
            self._restart()
            return
        if key == pygame.K_BACKSPACE:
            self._engine.start_or_advance(BACKSPACE)
            return
        if key == pygame.K_SPACE:
            self._engine.start_or_advance(SPACE)
            return
        ch = getattr(event, "unicode", "")
        if ch and len(ch) == 1 and ch.isprintable():
            self._engine.start_or_advance(ch)

    def update(self) -> None:
        self._engine.tick()
        result = self._engine.take_result()
        if result is not None:
            self._last_result = result
            self._new_best = self._profiles.record(result)

    def _restart(self) -> None:
        self._engine.reset()
        self._last_result = None
        self._new_best = False

    def render(self, surface: pygame.Surface) -> None:
        self.update()
        snap = self._engine.snapshot()
        mode_label = snap.mode.label if snap.mode is not None else "-"
        content = _draw_frame(surface, self._title_font, f"Typing Test ({mode_label})", "TEST")

        if snap.status is Status.COMPLETED and self._last_result is not None:
            self._render_results(surface, content, self._last_result)
        else:
            self._render_stats_line(surface, content, snap)
            words_rect = pygame.Rect(content.x + 8, content.y + 56, content.w - 16, content.h - 100)
            self._render_words(surface, words_rect, snap)

        hint = "Type to start  |  Enter/Tab: Restart  |  Esc: Back"
        foot = self._hint_font.render(hint, True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 8)))

    def _render_stats_line(self, surface: pygame.Surface, content: pygame.Rect, snap: TypingSnapshot) -> None:
        m = snap.metrics
        parts = [f"WPM {m.wpm:5.1f}", f"CPM {m.cpm:5.0f}", f"Accuracy {m.accuracy:5.1f}%"]
        if snap.time_remaining_s is not None:
            parts.append(f"Time {snap.time_remaining_s:4.1f}s")
        if snap.words_remaining is not None:
            parts.append(f"Words left {snap.words_remaining}")
        line = self._stat_font.render("   ".join(parts), True, TEXT_MAIN)
        surface.blit(line, (content.x + 8, content.y + 8))

    def _layout_lines(self, words: tuple[WordProgress, ...], max_width: int) -> list[list[int]]:
        space_w = self._word_font.size(" ")[0]
        lines: list[list[int]] = [[]]
        x = 0
        for idx, word in enumerate(words):
            word_w = self._word_font.size(word.text)[0]
            if lines[-1] and x + word_w > max_width:
                lines.append([])
                x = 0
            lines[-1].append(idx)
            x += word_w + space_w
        return lines

    def _render_words(self, surface: pygame.Surface, rect: pygame.Rect, snap: TypingSnapshot) -> None:
        if not snap.words:
            return
        lines = self._layout_lines(snap.words, rect.w)
        current_line = next((i for i, line in enumerate(lines) if snap.word_index in line), len(lines) - 1)
        first = max(0, current_line - 1)
        line_h = self._word_font.get_linesize() + 8
        visible = max(1, rect.h // line_h)
        space_w = self._word_font.size(" ")[0]

        y = rect.y
        for line in lines[first : first + visible]:
            x = rect.x
            for idx in line:
                word = snap.words[idx]
                for pos, ch in enumerate(word.text):
                    colour = STATE_COLOURS[word.states[pos]]
                    glyph = self._word_font.render(ch, True, colour)
                    if idx == snap.word_index and pos == snap.char_index:
                        base_y = y + glyph.get_height()
                        pygame.draw.line(surface, BORDER, (x, base_y), (x + glyph.get_width(), base_y), 2)
                    surface.blit(glyph, (x, y))
                    x += glyph.get_width()
                if idx == snap.word_index and snap.char_index == len(word.text):
                    pygame.draw.line(surface, BORDER, (x, y + 4), (x, y + line_h - 8), 2)
                x += space_w
            y += line_h

    def _render_results(self, surface: pygame.Surface, content: pygame.Rect, result: SessionResult) -> None:
        m = result.metrics
        lines = [
            "Results",
            f"WPM: {m.wpm:.1f}",
            f"CPM: {m.cpm:.0f}",
            f"Accuracy: {m.accuracy:.1f}%",
            f"Correct / incorrect: {m.correct_chars} / {m.incorrect_chars}",
            f"Time: {m.elapsed_s:.1f}s   Words: {result.words_completed}",
        ]
        if self._new_best:
            lines.append("New personal best!")
        y = content.y + 20
        for line in lines:
            img = self._stat_font.render(line, True, TEXT_MAIN)
            surface.blit(img, (content.x + 24, y))
            y += 36


class StatsScreen:
    def __init__(self, app: App, *, profiles: ProfileStore) -> None:
        self._app = app
        self._profiles = profiles
        self._title_font = pygame.font.Font(None, 42)
        self._row_font = pygame.font.Font(None, 30)
        self._hint_font = pygame.font.Font(None, 22)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN and event.key in (pygame.K_ESCAPE, pygame.K_BACKSPACE, pygame.K_RETURN):
            self._app.pop()

    def render(self, surface: pygame.Surface) -> None:
        content = _draw_frame(surface, self._title_font, "Personal Bests", "STATS")
        y = content.y + 12
        for mode in MODE_PRESETS:
            best = self._profiles.best_for(mode)
            if best is None:
                text = f"{mode.label:<12}  -"
            else:
                text = (
                    f"{mode.label:<12}  {best.wpm:6.1f} wpm   {best.cpm:5.0f} cpm   "
                    f"{best.accuracy:5.1f}%   {best.date_label()}"
                )
            img = self._row_font.render(text, True, TEXT_MAIN if best is not None else TEXT_MUTED)
            surface.blit(img, (content.x + 24, y))
            y += 36
        path = self._hint_font.render(f"Profile: {self._profiles.path}", True, TEXT_MUTED)
        surface.blit(path, (content.x + 24, y + 12))
        foot = self._hint_font.render("Esc: Back", True, TEXT_MUTED)
        surface.blit(foot, foot.get_rect(midbottom=(content.centerx, content.bottom + 8)))


def _options_items(app: App, prefs: Preferences) -> list[MenuItem]:
    def choose(mode: TestMode) -> Callable[[], None]:
        def apply() -> None:
            prefs.mode = mode
            logger.info("Test mode set to %s", mode.key)
            app.pop()

        return apply

    items = [
        MenuItem(f"{'Time' if isinstance(mode, TimeBound) else 'Words'}: {mode.label}", choose(mode))
        for mode in MODE_PRESETS
    ]
    items.append(MenuItem("Back", app.pop))
    return items


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    settings: Settings | None = None,
) -> int:
    settings = Settings.from_env() if settings is None else settings

    pygame.init()
    pygame.display.set_caption("termotype")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    clock = pygame.time.Clock()

    app = App(surface=surface)

    vocabulary = load_words(settings.words_path)
    profiles = ProfileStore(settings.resolved_profile_path())
    prefs = Preferences(mode=settings.mode)
    real_clock = RealClock()
    word_source = RandomWordSource(vocabulary, seed=settings.seed)

    def open_typing_test() -> None:
        try:
            engine = TypingTest(word_source=word_source, clock=real_clock, mode=prefs.mode)
        except ConfigurationError as exc:
            logger.error("Cannot start typing test: %s", exc)
            return
        app.push(TypingTestScreen(app, engine=engine, profiles=profiles))

    stats = StatsScreen(app, profiles=profiles)

    def open_options() -> None:
        app.push(MenuScreen(app, "Options", _options_items(app, prefs)))

    main_items = [
        MenuItem("Typing Test", open_typing_test),
        MenuItem("Stats", lambda: app.push(stats)),
        MenuItem("Options", open_options),
        MenuItem("Quit", app.quit),
    ]

    app.push(MenuScreen(app, "Main Menu", main_items, is_root=True))

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    return 0
