"""Static level catalog.

Ten levels climbing from grade 1 addition to grade 5/6 mixed operations.  Every
level asks for ten correct answers; the time limit grows by a minute every two
levels.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .difficulty import GradeTag, Operation

DEFAULT_REQUIRED_CORRECT = 10
DEFAULT_TIME_LIMIT_S = 90
TIME_INCREMENT_EVERY_TWO_LEVELS_S = 60


class AnswerMode(str, Enum):
    MULTIPLE_CHOICE = "multipleChoice"
    NUMBER_ENTRY = "numberEntry"


class LevelNotFoundError(LookupError):
    pass


@dataclass(frozen=True, slots=True)
class LevelDefinition:
    id: str
    level_number: int
    title: str
    grade_tags: tuple[GradeTag, ...]
    allowed_operations: tuple[Operation, ...]
    required_correct_answers: int
    time_limit_seconds: float

    def __post_init__(self) -> None:
        if not self.grade_tags:
            raise ValueError("grade_tags must not be empty")
        if not self.allowed_operations:
            raise ValueError("allowed_operations must not be empty")
        if self.required_correct_answers < 1:
            raise ValueError("required_correct_answers must be >= 1")
        if self.time_limit_seconds <= 0:
            raise ValueError("time_limit_seconds must be > 0")


def time_limit_for_level(level_number: int) -> int:
    pair_index = (level_number - 1) // 2
    return DEFAULT_TIME_LIMIT_S + pair_index * TIME_INCREMENT_EVERY_TWO_LEVELS_S


def _level(level_number: int, grades: tuple[GradeTag, ...], ops: tuple[Operation, ...]) -> LevelDefinition:
    return LevelDefinition(
        id=f"level-{level_number}",
        level_number=level_number,
        title=f"Level {level_number}",
        grade_tags=grades,
        allowed_operations=ops,
        required_correct_answers=DEFAULT_REQUIRED_CORRECT,
        time_limit_seconds=time_limit_for_level(level_number),
    )


_G = GradeTag
_ADD = (Operation.ADDITION,)
_ADD_SUB = (Operation.ADDITION, Operation.SUBTRACTION)
_ALL = (Operation.ADDITION, Operation.SUBTRACTION, Operation.MULTIPLICATION)

LEVEL_DEFINITIONS: tuple[LevelDefinition, ...] = (
    _level(1, (_G.GRADE1,), _ADD),
    _level(2, (_G.GRADE1, _G.GRADE2), _ADD_SUB),
    _level(3, (_G.GRADE2,), _ADD_SUB),
    _level(4, (_G.GRADE2, _G.GRADE3), _ALL),
    _level(5, (_G.GRADE3,), _ALL),
    _level(6, (_G.GRADE3, _G.GRADE4), _ALL),
    _level(7, (_G.GRADE4,), _ALL),
    _level(8, (_G.GRADE4, _G.GRADE5), _ALL),
    _level(9, (_G.GRADE5,), _ALL),
    _level(10, (_G.GRADE5, _G.GRADE6), _ALL),
)


def get_level_definition(level_number: int) -> LevelDefinition:
    for level in LEVEL_DEFINITIONS:
        if level.level_number == level_number:
            return level
    raise LevelNotFoundError(f"Level {level_number} not found")
