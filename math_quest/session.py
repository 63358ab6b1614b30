"""Session state for the arithmetic practice game.

One ``SessionState`` owns the current operation, the single current
``Problem`` and the running statistics. Every user action maps to one
transition method; the presentation layer renders ``snapshot()`` and calls
``update()`` once per frame so the delayed "next problem" step can fire.

Rounds
------
Each current problem belongs to a round. ``select_operation()``,
``reset()`` and the delayed advance after an answer all start a new round.
The delayed advance is scheduled with the round id at submission time and
is ignored if the round has moved on by the time it fires, so a reset or an
operation switch during the feedback window is never overwritten.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum

from .problems import Operation, Problem, ProblemGenerator, RandomSource, SeededRng
from .timers import Clock, Scheduler

logger = logging.getLogger(__name__)


class Feedback(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass(frozen=True, slots=True)
class GameConfig:
    seed: int | None = None
    default_operation: Operation = Operation.ADDITION
    feedback_delay_s: float = 1.5
    points_per_correct: int = 10

    def __post_init__(self) -> None:
        if self.feedback_delay_s < 0:
            raise ValueError("feedback_delay_s must be >= 0")
        if self.points_per_correct <= 0:
            raise ValueError("points_per_correct must be > 0")


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """View model for the UI (pure data)."""

    operation: Operation
    prompt: str
    operand1: int | None
    operand2: int | None
    symbol: str
    pending_input: str
    score: int
    streak: int
    completed_count: int
    feedback: Feedback | None
    revealed_answer: int | None
    accepting_input: bool


class SessionState:
    def __init__(self, config: GameConfig, *, clock: Clock, rng: RandomSource | None = None) -> None:
        self._config = config
        self._scheduler = Scheduler(clock)
        self._generator = ProblemGenerator(SeededRng(config.seed) if rng is None else rng)

        self._operation = config.default_operation
        self._problem: Problem | None = None
        self._input = ""
        self._score = 0
        self._streak = 0
        self._completed = 0
        self._feedback: Feedback | None = None
        self._round = 0

        self._start_new_problem()

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def current_operation(self) -> Operation:
        return self._operation

    @property
    def current_problem(self) -> Problem | None:
        return self._problem

    @property
    def pending_input(self) -> str:
        return self._input

    @property
    def score(self) -> int:
        return self._score

    @property
    def streak(self) -> int:
        return self._streak

    @property
    def completed_count(self) -> int:
        return self._completed

    @property
    def feedback(self) -> Feedback | None:
        return self._feedback

    @property
    def round_id(self) -> int:
        return self._round

    @property
    def accepting_input(self) -> bool:
        return self._feedback is None

    def select_operation(self, op: Operation) -> None:
        # Stats carry over across operation switches.
        self._operation = Operation(op)
        logger.debug("operation selected: %s", self._operation.value)
        self._start_new_problem()

    def record_input(self, text: str) -> None:
        self._input = text

    def submit_answer(self) -> bool:
        """Evaluate the pending input. Returns True if an answer was scored."""

        if self._problem is None or self._input == "":
            return False

        value = _try_parse_int(self._input)
        correct = value is not None and value == self._problem.expected_answer

        if correct:
            self._score += self._config.points_per_correct
            self._streak += 1
            self._feedback = Feedback.CORRECT
        else:
            self._streak = 0
            self._feedback = Feedback.INCORRECT
        self._completed += 1

        logger.debug(
            "round %d: %s answered %r -> %s (score=%d streak=%d)",
            self._round,
            self._problem.prompt,
            self._input,
            self._feedback.value,
            self._score,
            self._streak,
        )

        self._scheduler.call_later(self._config.feedback_delay_s, self._advance_round, token=self._round)
        return True

    def reset(self) -> None:
        self._score = 0
        self._streak = 0
        self._completed = 0
        logger.debug("session reset (operation=%s)", self._operation.value)
        self._start_new_problem()

    def update(self) -> None:
        self._scheduler.run_due()

    def snapshot(self) -> SessionSnapshot:
        p = self._problem
        revealed = None
        if p is not None and self._feedback is Feedback.INCORRECT:
            revealed = p.expected_answer
        return SessionSnapshot(
            operation=self._operation,
            prompt="" if p is None else p.prompt,
            operand1=None if p is None else p.operand1,
            operand2=None if p is None else p.operand2,
            symbol=self._operation.symbol,
            pending_input=self._input,
            score=self._score,
            streak=self._streak,
            completed_count=self._completed,
            feedback=self._feedback,
            revealed_answer=revealed,
            accepting_input=self.accepting_input,
        )

    def _advance_round(self, token: int) -> None:
        if token != self._round:
            logger.debug("ignoring stale advance for round %d (current %d)", token, self._round)
            return
        self._start_new_problem()

    def _start_new_problem(self) -> None:
        self._round += 1
        self._problem = self._generator.next_problem(self._operation)
        self._input = ""
        self._feedback = None


_ANSWER_RE = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)


def _try_parse_int(text: str) -> int | None:
    # ASCII decimal only; int() alone would also take "1_2" and non-Latin digits.
    if _ANSWER_RE.fullmatch(text) is None:
        return None
    return int(text)
