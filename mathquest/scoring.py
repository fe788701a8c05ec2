"""Pure scoring rules shared by every session mode."""

from __future__ import annotations

from .core import round_half_up

CORRECT_ANSWER_SKILL = 10
INCORRECT_ANSWER_SKILL = -5
SPEED_BONUS_SKILL = 5
SPEED_THRESHOLD_S = 30.0
MIN_SKILL_RATING = 0

COMBO_START = 1
COMBO_INCREMENT = 1
COMBO_RESET = 1

BASE_SCORE_PER_ANSWER = 10


def skill_delta(is_correct: bool, response_time_s: float) -> int:
    """Skill change for one answer: +10 (+5 if within 30s) when correct, -5 otherwise."""
    if not is_correct:
        return INCORRECT_ANSWER_SKILL
    delta = CORRECT_ANSWER_SKILL
    if response_time_s <= SPEED_THRESHOLD_S:
        delta += SPEED_BONUS_SKILL
    return delta


def update_skill_rating(current: float, is_correct: bool, response_time_s: float) -> float:
    return max(MIN_SKILL_RATING, current + skill_delta(is_correct, response_time_s))


def next_combo(current: int, is_correct: bool) -> int:
    if is_correct:
        return current + COMBO_INCREMENT
    return COMBO_RESET


def answer_score(base_score: int, combo_multiplier: int, is_correct: bool) -> int:
    if not is_correct:
        return 0
    return base_score * combo_multiplier


def accuracy_pct(correct: int, total: int) -> int:
    """Accuracy as a whole percentage, rounded half-up (0 when nothing answered)."""
    if total == 0:
        return 0
    return round_half_up(100.0 * correct / total)


def gems_earned(accuracy: float, questions_answered: int) -> int:
    # One gem per five answers, plus an accuracy bonus.
    gems = questions_answered // 5
    if accuracy >= 90:
        gems += 5
    elif accuracy >= 80:
        gems += 3
    elif accuracy >= 70:
        gems += 1
    return max(0, gems)
