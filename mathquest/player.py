"""Long-lived player profile and level progression.

These are pure transitions over frozen values: each function returns a new
value and leaves its input untouched.  How the values are stored between runs
is up to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum

from loguru import logger

from .difficulty import DifficultyTier, resolve_difficulty
from .levels import LEVEL_DEFINITIONS, AnswerMode, LevelDefinition
from .results import CrystalPopResult, LevelAttemptResult
from .scoring import CORRECT_ANSWER_SKILL, INCORRECT_ANSWER_SKILL, MIN_SKILL_RATING, accuracy_pct

INITIAL_SKILL_RATING = 1000


@dataclass(frozen=True, slots=True)
class PlayerStats:
    skill_rating: float = INITIAL_SKILL_RATING
    gems: int = 0
    stars: int = 0
    answer_mode: AnswerMode = AnswerMode.MULTIPLE_CHOICE
    unlocked_items: tuple[str, ...] = ()
    total_questions_answered: int = 0
    total_correct_answers: int = 0
    success_rate: int = 0


def apply_skill_delta(stats: PlayerStats, delta: float) -> PlayerStats:
    return replace(stats, skill_rating=max(MIN_SKILL_RATING, stats.skill_rating + delta))


def add_gems(stats: PlayerStats, amount: int) -> PlayerStats:
    return replace(stats, gems=stats.gems + amount)


def add_stars(stats: PlayerStats, amount: int) -> PlayerStats:
    return replace(stats, stars=stats.stars + amount)


def unlock(stats: PlayerStats, item_id: str) -> PlayerStats:
    if item_id in stats.unlocked_items:
        return stats
    return replace(stats, unlocked_items=(*stats.unlocked_items, item_id))


def record_answer(stats: PlayerStats, correct: bool) -> PlayerStats:
    total = stats.total_questions_answered + 1
    correct_total = stats.total_correct_answers + (1 if correct else 0)
    return replace(
        stats,
        total_questions_answered=total,
        total_correct_answers=correct_total,
        success_rate=accuracy_pct(correct_total, total),
    )


def adaptive_difficulty(stats: PlayerStats) -> DifficultyTier:
    return resolve_difficulty(stats.skill_rating)


def crystal_pop_skill_delta(result: CrystalPopResult) -> int:
    """Session-level skill change: +10 per correct, -5 per miss."""
    incorrect = result.questions_answered - result.correct_answers
    return result.correct_answers * CORRECT_ANSWER_SKILL + incorrect * INCORRECT_ANSWER_SKILL


def apply_crystal_pop_result(stats: PlayerStats, result: CrystalPopResult) -> PlayerStats:
    """Fold a finished Crystal Pop session into the profile."""
    updated = apply_skill_delta(stats, crystal_pop_skill_delta(result))
    updated = add_gems(updated, result.gems_earned)
    total = updated.total_questions_answered + result.questions_answered
    correct_total = updated.total_correct_answers + result.correct_answers
    return replace(
        updated,
        total_questions_answered=total,
        total_correct_answers=correct_total,
        success_rate=accuracy_pct(correct_total, total),
    )


class LevelStatus(str, Enum):
    LOCKED = "locked"
    UNLOCKED = "unlocked"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class LevelProgress:
    level_id: str
    level_number: int
    status: LevelStatus
    attempts_count: int = 0
    best_score: int = 0
    best_accuracy: int = 0
    best_completion_time_ms: int | None = None
    completed_at_s: float | None = None


def initial_level_progress(
    levels: Iterable[LevelDefinition] = LEVEL_DEFINITIONS,
) -> dict[int, LevelProgress]:
    return {
        level.level_number: LevelProgress(
            level_id=level.id,
            level_number=level.level_number,
            status=LevelStatus.UNLOCKED if level.level_number == 1 else LevelStatus.LOCKED,
        )
        for level in levels
    }


def is_level_unlocked(progress_by_level: Mapping[int, LevelProgress], level_number: int) -> bool:
    progress = progress_by_level.get(level_number)
    return progress is not None and progress.status is not LevelStatus.LOCKED


def is_better_attempt(candidate: LevelAttemptResult, current: LevelProgress) -> bool:
    # Score first, then faster completion, then accuracy.
    if candidate.score != current.best_score:
        return candidate.score > current.best_score
    if current.best_completion_time_ms is None:
        return True
    if candidate.completion_time_ms != current.best_completion_time_ms:
        return candidate.completion_time_ms < current.best_completion_time_ms
    return candidate.accuracy > current.best_accuracy


def record_level_attempt(
    progress_by_level: Mapping[int, LevelProgress],
    result: LevelAttemptResult,
) -> dict[int, LevelProgress]:
    """Return progress updated with one finished attempt.

    A pass completes the level, keeps the best attempt and unlocks the next
    level.  Unknown level numbers leave the progress unchanged.
    """
    updated = dict(progress_by_level)
    current = updated.get(result.level_number)
    if current is None:
        return updated

    nxt = replace(current, attempts_count=current.attempts_count + 1)
    if result.passed:
        nxt = replace(nxt, status=LevelStatus.COMPLETED, completed_at_s=result.ended_at_s)
        if is_better_attempt(result, current):
            nxt = replace(
                nxt,
                best_score=result.score,
                best_accuracy=result.accuracy,
                best_completion_time_ms=result.completion_time_ms,
            )
    updated[result.level_number] = nxt

    if result.passed:
        following = updated.get(result.level_number + 1)
        if following is not None and following.status is LevelStatus.LOCKED:
            updated[following.level_number] = replace(following, status=LevelStatus.UNLOCKED)
            logger.info("Level {} unlocked", following.level_number)

    return updated
