from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class RandomSource(Protocol):
    """Source of uniform integers. ``random.Random`` satisfies this."""

    def randint(self, a: int, b: int) -> int:
        """Return an integer in [a, b], both ends inclusive."""
        ...


class Operation(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_SYMBOLS = {
    Operation.ADDITION: "+",
    Operation.SUBTRACTION: "-",
    Operation.MULTIPLICATION: "×",
    Operation.DIVISION: "÷",
}


@dataclass(frozen=True, slots=True)
class Problem:
    operand1: int
    operand2: int
    operation: Operation
    expected_answer: int

    @property
    def prompt(self) -> str:
        return f"{self.operand1} {self.operation.symbol} {self.operand2} = ?"


class SeededRng:
    """Simple seeded RNG wrapper to keep deterministic streams explicit."""

    def __init__(self, seed: int | None = None) -> None:
        self._seed = _new_seed() if seed is None else int(seed)
        self._rng = random.Random(self._seed)

    @property
    def seed(self) -> int:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)


def generate_problem(operation: Operation, rng: RandomSource) -> Problem:
    """Draw one problem for ``operation``.

    Ranges are inclusive and fixed per operation:

    * addition: both operands in 1..50
    * subtraction: minuend in 25..74, subtrahend in 1..25 (never negative)
    * multiplication: both operands in 1..12
    * division: divisor and quotient in 1..12; the dividend is built as
      ``divisor * quotient`` so the answer is always an exact integer
    """

    if operation is Operation.ADDITION:
        a = rng.randint(1, 50)
        b = rng.randint(1, 50)
        ans = a + b
    elif operation is Operation.SUBTRACTION:
        a = rng.randint(25, 74)
        b = rng.randint(1, 25)
        ans = a - b
    elif operation is Operation.MULTIPLICATION:
        a = rng.randint(1, 12)
        b = rng.randint(1, 12)
        ans = a * b
    else:  # DIVISION
        divisor = rng.randint(1, 12)
        quotient = rng.randint(1, 12)
        a, b = divisor * quotient, divisor
        ans = quotient

    return Problem(operand1=a, operand2=b, operation=operation, expected_answer=ans)


class ProblemGenerator:
    """Deterministic problem stream over an injected random source."""

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng

    @classmethod
    def seeded(cls, seed: int) -> "ProblemGenerator":
        return cls(SeededRng(seed))

    def next_problem(self, operation: Operation) -> Problem:
        return generate_problem(Operation(operation), self._rng)


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)
