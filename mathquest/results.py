from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .difficulty import DifficultyTier
from .levels import AnswerMode


@dataclass(frozen=True, slots=True)
class CrystalPopResult:
    """Final, immutable summary of a Crystal Pop session.

    Consumed by the player profile (skill rating, gem total); the engine itself
    never writes persistent state.
    """

    session_id: str
    difficulty: DifficultyTier
    final_score: int
    questions_answered: int
    correct_answers: int
    accuracy: int  # percentage 0-100
    gems_earned: int
    max_combo: int
    duration_ms: int
    mean_rt_ms: float | None = None
    median_rt_ms: float | None = None


@dataclass(frozen=True, slots=True)
class LevelAttemptResult:
    """Final, immutable summary of one attempt at a level."""

    level_id: str
    level_number: int
    answer_mode: AnswerMode
    score: int
    accuracy: int
    completion_time_ms: int
    correct_answers: int
    total_answered: int
    passed: bool
    timed_out: bool
    ended_at_s: float
    mean_rt_ms: float | None = None
    median_rt_ms: float | None = None


def response_time_summary(rts_ms: Iterable[float]) -> tuple[float | None, float | None]:
    """Return (mean, median) of response times, or (None, None) if there are none."""

    ordered = sorted(float(rt) for rt in rts_ms)
    if not ordered:
        return None, None

    mean_ms = sum(ordered) / float(len(ordered))
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        median_ms = ordered[mid]
    else:
        median_ms = (ordered[mid - 1] + ordered[mid]) / 2.0
    return mean_ms, median_ms
