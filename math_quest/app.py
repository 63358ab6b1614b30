"""Pygame UI shell for Math Magician Quest.

Single screen: stats badges, an operation selector, the current problem with
the typed answer, feedback for the last answer and a "New Game" button.

Deterministic problem/scoring/timing state lives in math_quest.session; this
module only renders snapshots and turns keyboard/mouse events into session
transitions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

import pygame

from .problems import Operation
from .session import Feedback, GameConfig, SessionSnapshot, SessionState
from .timers import RealClock

logger = logging.getLogger(__name__)

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60
MAX_INPUT_LEN = 6

BG = (3, 9, 78)
PANEL_BG = (8, 18, 104)
HEADER_BG = (18, 30, 118)
BORDER = (226, 236, 255)
TEXT_MAIN = (238, 245, 255)
TEXT_MUTED = (186, 200, 224)
ACTIVE_BG = (244, 248, 255)
ACTIVE_TEXT = (14, 26, 74)
GOOD = (120, 220, 140)
BAD = (240, 120, 120)

_OPERATION_KEYS = {
    pygame.K_F1: Operation.ADDITION,
    pygame.K_F2: Operation.SUBTRACTION,
    pygame.K_F3: Operation.MULTIPLICATION,
    pygame.K_F4: Operation.DIVISION,
}


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


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

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def update(self) -> None:
        if self._screens:
            self._screens[-1].update()

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


class MathGameScreen:
    def __init__(self, app: App, *, session: SessionState) -> None:
        self._app = app
        self._session = session

        self._title_font = pygame.font.Font(None, 56)
        self._badge_font = pygame.font.Font(None, 30)
        self._button_font = pygame.font.Font(None, 32)
        self._problem_font = pygame.font.Font(None, 96)
        self._input_font = pygame.font.Font(None, 64)
        self._feedback_font = pygame.font.Font(None, 40)
        self._hint_font = pygame.font.Font(None, 22)

        # Mouse hitboxes, refreshed during render.
        self._operation_hitboxes: dict[Operation, pygame.Rect] = {}
        self._check_hitbox: pygame.Rect | None = None
        self._new_game_hitbox: pygame.Rect | None = None

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def operation_hitboxes(self) -> dict[Operation, pygame.Rect]:
        return dict(self._operation_hitboxes)

    @property
    def check_hitbox(self) -> pygame.Rect | None:
        return self._check_hitbox

    @property
    def new_game_hitbox(self) -> pygame.Rect | None:
        return self._new_game_hitbox

    # -- Event handling -----------------------------------------------------
    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.MOUSEBUTTONDOWN and getattr(event, "button", 0) == 1:
            pos = getattr(event, "pos", None)
            if pos is not None:
                self._handle_click(pos)
            return

        if event.type != pygame.KEYDOWN:
            return

        key = event.key
        if key == pygame.K_ESCAPE:
            self._app.quit()
            return

        op = _OPERATION_KEYS.get(key)
        if op is not None:
            self._session.select_operation(op)
            return
        if key in (pygame.K_LEFT, pygame.K_RIGHT):
            self._cycle_operation(-1 if key == pygame.K_LEFT else 1)
            return
        if key == pygame.K_F5:
            self._session.reset()
            return

        # Answer editing and submission are locked while feedback is showing.
        if not self._session.accepting_input:
            return

        text = self._session.pending_input
        if key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self._submit()
            return
        if key == pygame.K_BACKSPACE:
            self._session.record_input(text[:-1])
            return

        ch = getattr(event, "unicode", "")
        if len(text) >= MAX_INPUT_LEN:
            return
        if ch and (ch in "0123456789" or (ch == "-" and text == "")):
            self._session.record_input(text + ch)

    def _handle_click(self, pos: tuple[int, int]) -> None:
        for op, rect in self._operation_hitboxes.items():
            if rect.collidepoint(pos):
                self._session.select_operation(op)
                return
        if self._check_hitbox is not None and self._check_hitbox.collidepoint(pos):
            if self._session.accepting_input:
                self._submit()
            return
        if self._new_game_hitbox is not None and self._new_game_hitbox.collidepoint(pos):
            self._session.reset()

    def _submit(self) -> None:
        if self._session.pending_input == "":
            return
        self._session.submit_answer()

    def _cycle_operation(self, delta: int) -> None:
        ops = list(Operation)
        idx = ops.index(self._session.current_operation)
        self._session.select_operation(ops[(idx + delta) % len(ops)])

    def update(self) -> None:
        self._session.update()

    # -- Rendering ----------------------------------------------------------
    def render(self, surface: pygame.Surface) -> None:
        snap = self._session.snapshot()
        w, _ = surface.get_size()
        surface.fill(BG)

        title = self._title_font.render("Math Magician Quest", True, TEXT_MAIN)
        surface.blit(title, title.get_rect(midtop=(w // 2, 18)))
        subtitle = self._hint_font.render("Master your math skills with fun!", True, TEXT_MUTED)
        surface.blit(subtitle, subtitle.get_rect(midtop=(w // 2, 64)))

        self._render_badges(surface, snap, y=92)
        self._render_operations(surface, snap, y=146)
        self._render_problem(surface, snap, top=214)

        self._new_game_hitbox = pygame.Rect(0, 0, 180, 40)
        self._new_game_hitbox.midtop = (w // 2, 468)
        self._draw_button(surface, self._new_game_hitbox, "New Game", active=False)

        hint = self._hint_font.render(
            "F1-F4 or Left/Right: operation   Enter: check   F5: new game   Esc: quit",
            True,
            TEXT_MUTED,
        )
        surface.blit(hint, hint.get_rect(midtop=(w // 2, 516)))

    def _render_badges(self, surface: pygame.Surface, snap: SessionSnapshot, *, y: int) -> None:
        labels = [
            f"Score: {snap.score}",
            f"Streak: {snap.streak}",
            f"Problems: {snap.completed_count}",
        ]
        bw, bh, gap = 200, 40, 16
        x = (surface.get_width() - (len(labels) * bw + (len(labels) - 1) * gap)) // 2
        for label in labels:
            rect = pygame.Rect(x, y, bw, bh)
            pygame.draw.rect(surface, HEADER_BG, rect, border_radius=18)
            text = self._badge_font.render(label, True, TEXT_MAIN)
            surface.blit(text, text.get_rect(center=rect.center))
            x += bw + gap

    def _render_operations(self, surface: pygame.Surface, snap: SessionSnapshot, *, y: int) -> None:
        ops = list(Operation)
        bw, bh, gap = 200, 50, 20
        x = (surface.get_width() - (len(ops) * bw + (len(ops) - 1) * gap)) // 2
        self._operation_hitboxes = {}
        for op in ops:
            rect = pygame.Rect(x, y, bw, bh)
            self._operation_hitboxes[op] = rect
            self._draw_button(surface, rect, f"{op.symbol}  {op.label}", active=op is snap.operation)
            x += bw + gap

    def _render_problem(self, surface: pygame.Surface, snap: SessionSnapshot, *, top: int) -> None:
        w = surface.get_width()
        card = pygame.Rect(80, top, w - 160, 240)
        pygame.draw.rect(surface, PANEL_BG, card, border_radius=14)
        pygame.draw.rect(surface, BORDER, card, 2, border_radius=14)

        if snap.operand1 is None:
            return

        colour = TEXT_MAIN
        if snap.feedback is Feedback.CORRECT:
            colour = GOOD
        elif snap.feedback is Feedback.INCORRECT:
            colour = BAD
        prompt = self._problem_font.render(snap.prompt, True, colour)
        surface.blit(prompt, prompt.get_rect(midtop=(card.centerx, card.top + 16)))

        box = pygame.Rect(0, 0, 180, 64)
        box.topright = (card.centerx - 10, card.top + 100)
        pygame.draw.rect(surface, ACTIVE_BG if snap.accepting_input else TEXT_MUTED, box, border_radius=10)
        typed = self._input_font.render(snap.pending_input or "?", True, ACTIVE_TEXT)
        surface.blit(typed, typed.get_rect(center=box.center))

        self._check_hitbox = pygame.Rect(0, 0, 140, 64)
        self._check_hitbox.topleft = (card.centerx + 10, card.top + 100)
        enabled = snap.accepting_input and snap.pending_input != ""
        self._draw_button(surface, self._check_hitbox, "Check", active=enabled)

        if snap.feedback is Feedback.CORRECT:
            line = f"Correct! +{self._session.config.points_per_correct} points"
        elif snap.feedback is Feedback.INCORRECT:
            line = f"Not quite! The answer is {snap.revealed_answer}"
        else:
            return
        text = self._feedback_font.render(line, True, colour)
        surface.blit(text, text.get_rect(midtop=(card.centerx, card.top + 186)))

    def _draw_button(self, surface: pygame.Surface, rect: pygame.Rect, label: str, *, active: bool) -> None:
        pygame.draw.rect(surface, ACTIVE_BG if active else HEADER_BG, rect, border_radius=10)
        pygame.draw.rect(surface, BORDER, rect, 2, border_radius=10)
        text = self._button_font.render(label, True, ACTIVE_TEXT if active else TEXT_MAIN)
        surface.blit(text, text.get_rect(center=rect.center))


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    config: GameConfig | None = None,
) -> int:
    cfg = GameConfig() if config is None else config

    pygame.init()
    pygame.display.set_caption("Math Magician Quest")
    surface = pygame.display.set_mode(WINDOW_SIZE)

    clock = pygame.time.Clock()

    app = App(surface=surface)
    session = SessionState(cfg, clock=RealClock())
    app.push(MathGameScreen(app, session=session))
    logger.info("game started (operation=%s)", session.current_operation.value)

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.update()
            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            clock.tick(TARGET_FPS)
    finally:
        pygame.quit()

    logger.info(
        "game closed: score=%d streak=%d problems=%d",
        session.score,
        session.streak,
        session.completed_count,
    )
    return 0
