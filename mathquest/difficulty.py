"""Adaptive difficulty tiers.

Maps a persistent skill rating to one of four ordinal tiers, and each tier to
the operand range and operation set questions are drawn from.  All tables are
keyed by the enums below; the test suite checks that every member has an entry.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class Operation(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"


class GradeTag(str, Enum):
    GRADE1 = "grade1"
    GRADE2 = "grade2"
    GRADE3 = "grade3"
    GRADE4 = "grade4"
    GRADE5 = "grade5"
    GRADE6 = "grade6"


class DifficultyTier(str, Enum):
    VERY_EASY = "veryEasy"
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True, slots=True)
class NumberRange:
    min: int
    max: int


@dataclass(frozen=True, slots=True)
class TierConfig:
    tier: DifficultyTier
    min_skill: float
    max_skill: float  # exclusive; math.inf for the top tier
    number_range: NumberRange
    allowed_operations: tuple[Operation, ...]


_ALL_OPS = (Operation.ADDITION, Operation.SUBTRACTION, Operation.MULTIPLICATION)

_TIER_CONFIGS: dict[DifficultyTier, TierConfig] = {
    DifficultyTier.VERY_EASY: TierConfig(
        tier=DifficultyTier.VERY_EASY,
        min_skill=0,
        max_skill=900,
        number_range=NumberRange(1, 10),
        allowed_operations=(Operation.ADDITION,),
    ),
    DifficultyTier.EASY: TierConfig(
        tier=DifficultyTier.EASY,
        min_skill=900,
        max_skill=1100,
        number_range=NumberRange(1, 20),
        allowed_operations=(Operation.ADDITION, Operation.SUBTRACTION),
    ),
    DifficultyTier.MEDIUM: TierConfig(
        tier=DifficultyTier.MEDIUM,
        min_skill=1100,
        max_skill=1300,
        number_range=NumberRange(1, 50),
        allowed_operations=_ALL_OPS,
    ),
    DifficultyTier.HARD: TierConfig(
        tier=DifficultyTier.HARD,
        min_skill=1300,
        max_skill=math.inf,
        number_range=NumberRange(1, 100),
        allowed_operations=_ALL_OPS,
    ),
}

_GRADE_TO_TIER: dict[GradeTag, DifficultyTier] = {
    GradeTag.GRADE1: DifficultyTier.VERY_EASY,
    GradeTag.GRADE2: DifficultyTier.EASY,
    GradeTag.GRADE3: DifficultyTier.MEDIUM,
    GradeTag.GRADE4: DifficultyTier.HARD,
    GradeTag.GRADE5: DifficultyTier.HARD,
    GradeTag.GRADE6: DifficultyTier.HARD,
}

_DEFAULT_GRADE: dict[DifficultyTier, GradeTag] = {
    DifficultyTier.VERY_EASY: GradeTag.GRADE1,
    DifficultyTier.EASY: GradeTag.GRADE2,
    DifficultyTier.MEDIUM: GradeTag.GRADE3,
    DifficultyTier.HARD: GradeTag.GRADE4,
}


def resolve_difficulty(skill_rating: float) -> DifficultyTier:
    """Return the tier for a skill rating (starting rating is 1000)."""
    if skill_rating < 900:
        return DifficultyTier.VERY_EASY
    if skill_rating < 1100:
        return DifficultyTier.EASY
    if skill_rating < 1300:
        return DifficultyTier.MEDIUM
    return DifficultyTier.HARD


def tier_config(tier: DifficultyTier) -> TierConfig:
    return _TIER_CONFIGS[tier]


def number_range(tier: DifficultyTier) -> NumberRange:
    return _TIER_CONFIGS[tier].number_range


def skill_bounds(tier: DifficultyTier) -> tuple[float, float]:
    cfg = _TIER_CONFIGS[tier]
    return cfg.min_skill, cfg.max_skill


def operations_for_difficulty(tier: DifficultyTier) -> tuple[Operation, ...]:
    return _TIER_CONFIGS[tier].allowed_operations


def all_tiers() -> list[DifficultyTier]:
    return list(DifficultyTier)


def grade_to_difficulty(grade_tag: GradeTag) -> DifficultyTier:
    return _GRADE_TO_TIER[grade_tag]


def default_grade_for_difficulty(tier: DifficultyTier) -> GradeTag:
    return _DEFAULT_GRADE[tier]
