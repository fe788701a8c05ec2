from __future__ import annotations

import math
import random
from collections.abc import Sequence
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    ACTIVE = "active"
    FINALIZED = "finalized"


class SessionError(RuntimeError):
    """Base class for misuse of a session engine by its caller."""


class SessionAlreadyStartedError(SessionError):
    pass


class SessionNotStartedError(SessionError):
    pass


class SessionEndedError(SessionError):
    pass


class NoActiveQuestionError(SessionError):
    pass


class SessionExpiredError(SessionError):
    """The time limit has passed; the caller must end the session instead."""


class SessionNotFinalizedError(SessionError):
    pass


class QuestionSpaceExhaustedError(SessionError):
    """No unseen question could be drawn for a level.

    Raised when the level's grade/operation space is too small to support its
    required-correct goal without repeating questions.
    """


class SeededRng:
    """Seeded RNG wrapper to keep deterministic streams explicit.

    ``seed=None`` draws from OS entropy (production play).
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = None if seed is None else int(seed)
        self._rng = random.Random(self._seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)

    def shuffle(self, items: list[T]) -> None:
        self._rng.shuffle(items)


def round_half_up(x: float) -> int:
    # Educational-style rounding (2.5 -> 3), unlike Python's banker's round().
    return int(math.floor(x + 0.5))
