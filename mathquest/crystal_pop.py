"""Crystal Pop: the timed arcade mini-game.

Session state machine::

    UNINITIALIZED -> ACTIVE -> FINALIZED

A session runs for a fixed wall-clock duration (90s by default).  Questions
are always multiple choice.  Each correct answer scores ``10 x combo`` using
the combo in force *before* the answer, then bumps the combo; a miss scores
nothing and resets the combo to 1.  Repeated questions are allowed.

Time is never accumulated: remaining time is recomputed from the injected
clock on every query, and ``submit_answer`` checks expiry at call time.  The
caller owns any ticking (refreshing a display, ending the session on expiry).
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass

from loguru import logger

from .clock import Clock, RealClock
from .core import (
    NoActiveQuestionError,
    SeededRng,
    SessionAlreadyStartedError,
    SessionEndedError,
    SessionExpiredError,
    SessionNotFinalizedError,
    SessionNotStartedError,
    SessionState,
)
from .difficulty import DifficultyTier, operations_for_difficulty
from .math_generator import MathQuestion, generate_question
from .results import CrystalPopResult, response_time_summary
from .scoring import BASE_SCORE_PER_ANSWER, COMBO_START, accuracy_pct, answer_score, next_combo

DEFAULT_DURATION_S = 90.0
GEMS_PER_CORRECT = 1


@dataclass(frozen=True, slots=True)
class CrystalPopConfig:
    difficulty: DifficultyTier
    duration_s: float = DEFAULT_DURATION_S
    seed: int | None = None


@dataclass(frozen=True, slots=True)
class CrystalPopAnswer:
    question_id: str
    user_answer: int
    response_time_ms: float
    is_correct: bool
    points_earned: int
    combo_at_time: int
    answered_at_s: float


@dataclass(frozen=True, slots=True)
class AnswerOutcome:
    is_correct: bool
    points_earned: int
    new_combo: int
    gems_added: int


@dataclass(frozen=True, slots=True)
class CrystalPopSnapshot:
    """View model for the UI (pure data)."""

    session_id: str
    state: SessionState
    difficulty: DifficultyTier
    duration_s: float
    score: int
    combo: int
    combo_display: str
    max_combo: int
    questions_attempted: int
    correct_answers: int
    accuracy: int
    gems_earned: int
    time_remaining_ms: float
    time_remaining_s: int
    is_expired: bool


class CrystalPopSession:
    def __init__(self, config: CrystalPopConfig, *, clock: Clock | None = None) -> None:
        if config.duration_s <= 0:
            raise ValueError("duration_s must be > 0")

        self._config = config
        self._clock: Clock = clock if clock is not None else RealClock()
        self._rng = SeededRng(config.seed)
        self._session_id = f"cp_{uuid.uuid4().hex}"

        self._state = SessionState.UNINITIALIZED
        self._started_at_s: float | None = None
        self._ended_at_s: float | None = None

        self._score = 0
        self._combo = COMBO_START
        self._max_combo = COMBO_START
        self._attempted = 0
        self._correct = 0
        self._gems = 0

        self._current: MathQuestion | None = None
        self._answers: list[CrystalPopAnswer] = []
        self._result: CrystalPopResult | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def difficulty(self) -> DifficultyTier:
        return self._config.difficulty

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_question(self) -> MathQuestion | None:
        return self._current

    @property
    def combo(self) -> int:
        return self._combo

    @property
    def max_combo(self) -> int:
        return self._max_combo

    @property
    def score(self) -> int:
        return self._score

    def answers(self) -> list[CrystalPopAnswer]:
        return list(self._answers)

    def initialize(self) -> None:
        """Start the clock and deal the first question."""
        if self._state is not SessionState.UNINITIALIZED:
            raise SessionAlreadyStartedError("Session already initialized")
        self._started_at_s = self._clock.now()
        self._state = SessionState.ACTIVE
        self.generate_next_question()
        logger.debug(
            "Crystal Pop session {} started ({}, {}s)",
            self._session_id,
            self._config.difficulty.value,
            self._config.duration_s,
        )

    def generate_next_question(self) -> MathQuestion:
        if self._state is SessionState.UNINITIALIZED:
            raise SessionNotStartedError("Session has not been initialized")
        if self._state is SessionState.FINALIZED:
            raise SessionEndedError("Session has ended")
        operation = self._rng.choice(operations_for_difficulty(self._config.difficulty))
        self._current = generate_question(operation, self._config.difficulty, True, rng=self._rng)
        return self._current

    def submit_answer(self, user_answer: int, response_time_ms: float) -> AnswerOutcome:
        """Judge ``user_answer`` against the current question.

        Does not advance; call :meth:`generate_next_question` for the next one.
        """
        if self._state is SessionState.FINALIZED:
            raise SessionEndedError("Session has ended")
        if self._current is None:
            raise NoActiveQuestionError("No question is currently active")
        if self.is_expired():
            raise SessionExpiredError("Session has expired")

        is_correct = user_answer == self._current.correct_answer

        self._attempted += 1
        if is_correct:
            self._correct += 1

        combo_before = self._combo
        self._combo = next_combo(combo_before, is_correct)
        self._max_combo = max(self._max_combo, self._combo)

        points = answer_score(BASE_SCORE_PER_ANSWER, combo_before, is_correct)
        self._score += points

        gems_added = GEMS_PER_CORRECT if is_correct else 0
        self._gems += gems_added

        self._answers.append(
            CrystalPopAnswer(
                question_id=self._current.id,
                user_answer=user_answer,
                response_time_ms=float(response_time_ms),
                is_correct=is_correct,
                points_earned=points,
                combo_at_time=combo_before if is_correct else self._combo,
                answered_at_s=self._clock.now(),
            )
        )

        return AnswerOutcome(
            is_correct=is_correct,
            points_earned=points,
            new_combo=self._combo,
            gems_added=gems_added,
        )

    def time_remaining_ms(self) -> float:
        duration_ms = self._config.duration_s * 1000.0
        if self._started_at_s is None:
            return duration_ms
        elapsed_ms = (self._clock.now() - self._started_at_s) * 1000.0
        return max(0.0, duration_ms - elapsed_ms)

    def time_remaining_seconds(self) -> int:
        return int(math.ceil(self.time_remaining_ms() / 1000.0))

    def is_expired(self) -> bool:
        return self.time_remaining_ms() <= 0.0

    def snapshot(self) -> CrystalPopSnapshot:
        remaining_ms = self.time_remaining_ms()
        return CrystalPopSnapshot(
            session_id=self._session_id,
            state=self._state,
            difficulty=self._config.difficulty,
            duration_s=self._config.duration_s,
            score=self._score,
            combo=self._combo,
            combo_display=f"{self._combo}x",
            max_combo=self._max_combo,
            questions_attempted=self._attempted,
            correct_answers=self._correct,
            accuracy=accuracy_pct(self._correct, self._attempted),
            gems_earned=self._gems,
            time_remaining_ms=remaining_ms,
            time_remaining_s=int(math.ceil(remaining_ms / 1000.0)),
            is_expired=remaining_ms <= 0.0,
        )

    def end_session(self) -> CrystalPopResult:
        """Finalize once and return the cached result on every call."""
        if self._state is SessionState.FINALIZED:
            return self._final_result()

        self._ended_at_s = self._clock.now()
        if self._started_at_s is None:
            self._started_at_s = self._ended_at_s
        self._state = SessionState.FINALIZED
        self._current = None

        mean_rt, median_rt = response_time_summary(a.response_time_ms for a in self._answers)
        self._result = CrystalPopResult(
            session_id=self._session_id,
            difficulty=self._config.difficulty,
            final_score=self._score,
            questions_answered=self._attempted,
            correct_answers=self._correct,
            accuracy=accuracy_pct(self._correct, self._attempted),
            gems_earned=self._gems,
            max_combo=self._max_combo,
            duration_ms=int(round((self._ended_at_s - self._started_at_s) * 1000.0)),
            mean_rt_ms=mean_rt,
            median_rt_ms=median_rt,
        )
        logger.debug(
            "Crystal Pop session {} ended: score={} answered={} max_combo={}",
            self._session_id,
            self._score,
            self._attempted,
            self._max_combo,
        )
        return self._result

    def _final_result(self) -> CrystalPopResult:
        if self._result is None:
            raise SessionNotFinalizedError("Session has not been finalized")
        return self._result
