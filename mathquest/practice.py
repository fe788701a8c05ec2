"""Untimed practice mode.

Same unique-question dealing and goal as a level, but with no clock and
number-entry questions only.  Reaching the goal completes the session for
good.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .core import (
    NoActiveQuestionError,
    SeededRng,
    SessionAlreadyStartedError,
    SessionEndedError,
    SessionNotStartedError,
    SessionState,
)
from .level_session import UniqueQuestionSource
from .levels import LevelDefinition
from .math_generator import MathQuestion
from .scoring import BASE_SCORE_PER_ANSWER, accuracy_pct


@dataclass(frozen=True, slots=True)
class PracticeStats:
    score: int
    accuracy: int
    correct_answers: int
    total_answered: int


@dataclass(frozen=True, slots=True)
class PracticeOutcome:
    is_correct: bool
    completed: bool
    stats: PracticeStats


class PracticeModeSession:
    def __init__(self, level: LevelDefinition, *, seed: int | None = None) -> None:
        self._level = level
        self._questions = UniqueQuestionSource(level, SeededRng(seed), multiple_choice=False)

        self._state = SessionState.UNINITIALIZED
        self._current: MathQuestion | None = None
        self._score = 0
        self._correct = 0
        self._answered = 0

    @property
    def level(self) -> LevelDefinition:
        return self._level

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_question(self) -> MathQuestion | None:
        return self._current

    def initialize(self) -> None:
        if self._state is not SessionState.UNINITIALIZED:
            raise SessionAlreadyStartedError("Practice session already initialized")
        self._state = SessionState.ACTIVE
        self.generate_next_question()
        logger.debug("Practice session started for {}", self._level.id)

    def is_completed(self) -> bool:
        return self._state is SessionState.FINALIZED

    def stats(self) -> PracticeStats:
        return PracticeStats(
            score=self._score,
            accuracy=accuracy_pct(self._correct, self._answered),
            correct_answers=self._correct,
            total_answered=self._answered,
        )

    def submit_answer(self, user_answer: int) -> PracticeOutcome:
        if self._state is SessionState.FINALIZED:
            raise SessionEndedError("Practice session is already completed")
        if self._current is None:
            raise NoActiveQuestionError("No active question")

        is_correct = user_answer == self._current.correct_answer

        self._answered += 1
        if is_correct:
            self._correct += 1
            self._score += BASE_SCORE_PER_ANSWER

        completed = self._correct >= self._level.required_correct_answers
        if completed:
            self._state = SessionState.FINALIZED
            logger.debug(
                "Practice session for {} completed after {} answers",
                self._level.id,
                self._answered,
            )
        else:
            self.generate_next_question()

        return PracticeOutcome(is_correct=is_correct, completed=completed, stats=self.stats())

    def generate_next_question(self) -> MathQuestion:
        if self._state is SessionState.UNINITIALIZED:
            raise SessionNotStartedError("Practice session has not been initialized")
        if self._state is SessionState.FINALIZED:
            raise SessionEndedError("Practice session is already completed")
        self._current = self._questions.next_question()
        return self._current
