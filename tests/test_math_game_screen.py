from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from math_quest.app import WINDOW_SIZE, App, MathGameScreen  # noqa: E402
from math_quest.problems import Operation  # noqa: E402
from math_quest.session import Feedback, GameConfig, SessionState  # noqa: E402


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += dt


@pytest.fixture
def surface() -> Iterator[pygame.Surface]:
    pygame.init()
    try:
        yield pygame.display.set_mode(WINDOW_SIZE)
    finally:
        pygame.quit()


def _key(k: int, unicode: str = "") -> pygame.event.Event:
    return pygame.event.Event(pygame.KEYDOWN, {"key": k, "unicode": unicode, "mod": 0})


def _click(pos: tuple[int, int]) -> pygame.event.Event:
    return pygame.event.Event(pygame.MOUSEBUTTONDOWN, {"button": 1, "pos": pos})


def _screen(surface: pygame.Surface) -> tuple[App, MathGameScreen, FakeClock]:
    clock = FakeClock()
    app = App(surface)
    screen = MathGameScreen(app, session=SessionState(GameConfig(seed=42), clock=clock))
    app.push(screen)
    return app, screen, clock


def _type(screen: MathGameScreen, text: str) -> None:
    for ch in text:
        key = pygame.K_MINUS if ch == "-" else getattr(pygame, f"K_{ch}")
        screen.handle_event(_key(key, ch))


def test_typing_and_enter_submits_answer(surface: pygame.Surface) -> None:
    _, screen, clock = _screen(surface)
    session = screen.session
    assert session.current_problem is not None
    answer = str(session.current_problem.expected_answer)

    _type(screen, answer)
    assert session.pending_input == answer
    screen.handle_event(_key(pygame.K_RETURN))
    assert session.feedback is Feedback.CORRECT
    assert session.score == 10

    # Input is locked while feedback shows.
    _type(screen, "9")
    assert session.pending_input == answer

    screen.render(surface)
    clock.advance(1.5)
    screen.update()
    assert session.feedback is None
    assert session.pending_input == ""


def test_enter_with_empty_input_does_nothing(surface: pygame.Surface) -> None:
    _, screen, _ = _screen(surface)
    screen.handle_event(_key(pygame.K_RETURN))
    assert screen.session.completed_count == 0


def test_backspace_and_minus_editing(surface: pygame.Surface) -> None:
    _, screen, _ = _screen(surface)
    _type(screen, "-12")
    screen.handle_event(_key(pygame.K_MINUS, "-"))
    assert screen.session.pending_input == "-12"
    screen.handle_event(_key(pygame.K_BACKSPACE))
    assert screen.session.pending_input == "-1"


def test_function_keys_and_arrows_select_operation(surface: pygame.Surface) -> None:
    _, screen, _ = _screen(surface)
    screen.handle_event(_key(pygame.K_F4))
    assert screen.session.current_operation is Operation.DIVISION
    screen.handle_event(_key(pygame.K_RIGHT))
    assert screen.session.current_operation is Operation.ADDITION
    screen.handle_event(_key(pygame.K_LEFT))
    assert screen.session.current_operation is Operation.DIVISION


def test_mouse_selects_operation_and_resets(surface: pygame.Surface) -> None:
    _, screen, _ = _screen(surface)
    screen.render(surface)

    screen.handle_event(_click(screen.operation_hitboxes[Operation.MULTIPLICATION].center))
    assert screen.session.current_operation is Operation.MULTIPLICATION

    screen.render(surface)
    check = screen.check_hitbox
    assert check is not None
    screen.handle_event(_click(check.center))
    assert screen.session.completed_count == 0  # nothing typed yet

    _type(screen, "0")
    screen.handle_event(_click(check.center))
    assert screen.session.completed_count == 1

    screen.render(surface)
    new_game = screen.new_game_hitbox
    assert new_game is not None
    screen.handle_event(_click(new_game.center))
    assert screen.session.completed_count == 0
    assert screen.session.current_operation is Operation.MULTIPLICATION


def test_escape_quits(surface: pygame.Surface) -> None:
    app, screen, _ = _screen(surface)
    screen.handle_event(_key(pygame.K_ESCAPE))
    assert not app.running


def test_non_ascii_digits_are_not_typed(surface: pygame.Surface) -> None:
    _, screen, _ = _screen(surface)
    screen.handle_event(_key(pygame.K_1, "１"))
    screen.handle_event(_key(pygame.K_2, "٢"))
    assert screen.session.pending_input == ""
