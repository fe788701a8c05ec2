"""Level mode: a timed session with a required-correct goal.

The session passes as soon as ``required_correct_answers`` is reached and
times out if the level's time limit runs out first.  Questions never repeat
within one session: each is drawn from the level's grade tags and operations
and rejected if its fingerprint has already been dealt.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from .clock import Clock, RealClock
from .core import (
    NoActiveQuestionError,
    QuestionSpaceExhaustedError,
    SeededRng,
    SessionAlreadyStartedError,
    SessionEndedError,
    SessionExpiredError,
    SessionNotFinalizedError,
    SessionNotStartedError,
    SessionState,
)
from .difficulty import grade_to_difficulty
from .levels import AnswerMode, LevelDefinition
from .math_generator import MathQuestion, generate_question, question_fingerprint
from .results import LevelAttemptResult, response_time_summary
from .scoring import BASE_SCORE_PER_ANSWER, accuracy_pct

MAX_UNIQUE_ATTEMPTS = 80


class UniqueQuestionSource:
    """Deals questions for a level, never repeating a fingerprint.

    Shared by the level and practice engines.  Gives up after
    ``MAX_UNIQUE_ATTEMPTS`` consecutive collisions.
    """

    def __init__(self, level: LevelDefinition, rng: SeededRng, *, multiple_choice: bool) -> None:
        self._level = level
        self._rng = rng
        self._multiple_choice = multiple_choice
        self._seen: set[str] = set()

    @property
    def seen_count(self) -> int:
        return len(self._seen)

    def next_question(self) -> MathQuestion:
        for _ in range(MAX_UNIQUE_ATTEMPTS):
            grade_tag = self._rng.choice(self._level.grade_tags)
            operation = self._rng.choice(self._level.allowed_operations)
            candidate = generate_question(
                operation,
                grade_to_difficulty(grade_tag),
                self._multiple_choice,
                rng=self._rng,
                grade_tag=grade_tag,
            )
            key = question_fingerprint(candidate)
            if key not in self._seen:
                self._seen.add(key)
                return candidate

        logger.warning(
            "Question space exhausted for {} after {} unique questions",
            self._level.id,
            len(self._seen),
        )
        raise QuestionSpaceExhaustedError(
            f"Unable to generate a unique question for {self._level.id} "
            f"after {MAX_UNIQUE_ATTEMPTS} attempts"
        )


@dataclass(frozen=True, slots=True)
class LevelAnswerRecord:
    question_id: str
    question_key: str
    question: MathQuestion
    user_answer: int
    is_correct: bool
    response_time_ms: int
    answered_at_s: float


@dataclass(frozen=True, slots=True)
class LevelSessionStats:
    score: int
    accuracy: int
    correct_answers: int
    total_answered: int
    remaining_ms: float


@dataclass(frozen=True, slots=True)
class LevelAnswerOutcome:
    is_correct: bool
    passed: bool
    score: int


class LevelSession:
    """
    Deterministic level attempt:

      UNINITIALIZED -> ACTIVE -> FINALIZED

    Given (seed, scripted answers, fake clock) the run is fully reproducible.
    """

    def __init__(
        self,
        level: LevelDefinition,
        answer_mode: AnswerMode = AnswerMode.MULTIPLE_CHOICE,
        *,
        clock: Clock | None = None,
        seed: int | None = None,
    ) -> None:
        self._level = level
        self._answer_mode = answer_mode
        self._clock: Clock = clock if clock is not None else RealClock()
        self._questions = UniqueQuestionSource(
            level,
            SeededRng(seed),
            multiple_choice=answer_mode is AnswerMode.MULTIPLE_CHOICE,
        )

        self._state = SessionState.UNINITIALIZED
        self._started_at_s: float | None = None
        self._ended_at_s: float | None = None

        self._score = 0
        self._correct = 0
        self._answered = 0

        self._current: MathQuestion | None = None
        self._shown_at_s: float | None = None
        self._answer_log: list[LevelAnswerRecord] = []
        self._result: LevelAttemptResult | None = None

    @property
    def level(self) -> LevelDefinition:
        return self._level

    @property
    def answer_mode(self) -> AnswerMode:
        return self._answer_mode

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def current_question(self) -> MathQuestion | None:
        return self._current

    def initialize(self) -> None:
        if self._state is not SessionState.UNINITIALIZED:
            raise SessionAlreadyStartedError("Session already initialized")
        self._started_at_s = self._clock.now()
        self._state = SessionState.ACTIVE
        self.generate_next_question()
        logger.debug("Level session started for {} ({})", self._level.id, self._answer_mode.value)

    def remaining_ms(self) -> float:
        limit_ms = float(self._level.time_limit_seconds) * 1000.0
        if self._started_at_s is None:
            return limit_ms
        elapsed_ms = (self._clock.now() - self._started_at_s) * 1000.0
        return max(0.0, limit_ms - elapsed_ms)

    def is_expired(self) -> bool:
        return self.remaining_ms() <= 0.0

    def has_passed(self) -> bool:
        return self._correct >= self._level.required_correct_answers

    def stats(self) -> LevelSessionStats:
        return LevelSessionStats(
            score=self._score,
            accuracy=accuracy_pct(self._correct, self._answered),
            correct_answers=self._correct,
            total_answered=self._answered,
            remaining_ms=self.remaining_ms(),
        )

    def answer_log(self) -> list[LevelAnswerRecord]:
        return list(self._answer_log)

    def submit_answer(self, user_answer: int) -> LevelAnswerOutcome:
        if self._state is SessionState.FINALIZED:
            raise SessionEndedError("Session has ended")
        if self._current is None or self._shown_at_s is None:
            raise NoActiveQuestionError("No active question")
        if self.is_expired():
            raise SessionExpiredError("Time has expired")

        now = self._clock.now()
        response_time_ms = max(1, int(round((now - self._shown_at_s) * 1000.0)))
        is_correct = user_answer == self._current.correct_answer

        self._answered += 1
        if is_correct:
            self._correct += 1
            self._score += BASE_SCORE_PER_ANSWER

        self._answer_log.append(
            LevelAnswerRecord(
                question_id=self._current.id,
                question_key=question_fingerprint(self._current),
                question=self._current,
                user_answer=user_answer,
                is_correct=is_correct,
                response_time_ms=response_time_ms,
                answered_at_s=now,
            )
        )

        passed = self.has_passed()
        # Once passed the caller is expected to end the session.
        if not passed and not self.is_expired():
            self.generate_next_question()

        return LevelAnswerOutcome(is_correct=is_correct, passed=passed, score=self._score)

    def generate_next_question(self) -> MathQuestion:
        if self._state is SessionState.UNINITIALIZED:
            raise SessionNotStartedError("Session has not been initialized")
        if self._state is SessionState.FINALIZED:
            raise SessionEndedError("Session has ended")
        self._current = self._questions.next_question()
        self._shown_at_s = self._clock.now()
        return self._current

    def end_session(self) -> LevelAttemptResult:
        """Finalize once; later calls return the same result object."""
        if self._state is SessionState.FINALIZED:
            return self._final_result()

        now = self._clock.now()
        passed = self.has_passed()
        timed_out = self.is_expired() and not passed
        started_at_s = self._started_at_s if self._started_at_s is not None else now

        self._ended_at_s = now
        self._state = SessionState.FINALIZED

        mean_rt, median_rt = response_time_summary(r.response_time_ms for r in self._answer_log)
        self._result = LevelAttemptResult(
            level_id=self._level.id,
            level_number=self._level.level_number,
            answer_mode=self._answer_mode,
            score=self._score,
            accuracy=accuracy_pct(self._correct, self._answered),
            completion_time_ms=max(0, int(round((now - started_at_s) * 1000.0))),
            correct_answers=self._correct,
            total_answered=self._answered,
            passed=passed,
            timed_out=timed_out,
            ended_at_s=now,
            mean_rt_ms=mean_rt,
            median_rt_ms=median_rt,
        )
        logger.debug(
            "Level session for {} ended: passed={} timed_out={} score={}",
            self._level.id,
            passed,
            timed_out,
            self._score,
        )
        return self._result

    def _final_result(self) -> LevelAttemptResult:
        if self._result is None:
            raise SessionNotFinalizedError("Session not finalized")
        return self._result
