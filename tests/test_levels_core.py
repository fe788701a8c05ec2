from __future__ import annotations

import pytest

from mathquest.difficulty import GradeTag, Operation
from mathquest.levels import LEVEL_DEFINITIONS, LevelNotFoundError, get_level_definition, time_limit_for_level


def test_catalog_shape() -> None:
    assert [lvl.level_number for lvl in LEVEL_DEFINITIONS] == list(range(1, 11))
    for lvl in LEVEL_DEFINITIONS:
        assert lvl.id == f"level-{lvl.level_number}"
        assert lvl.title == f"Level {lvl.level_number}"
        assert lvl.required_correct_answers == 10


def test_time_limit_grows_every_two_levels() -> None:
    assert [time_limit_for_level(n) for n in range(1, 7)] == [90, 90, 150, 150, 210, 210]
    assert get_level_definition(10).time_limit_seconds == 330


def test_grade_and_operation_sets() -> None:
    first = get_level_definition(1)
    assert first.grade_tags == (GradeTag.GRADE1,)
    assert first.allowed_operations == (Operation.ADDITION,)

    assert get_level_definition(2).grade_tags == (GradeTag.GRADE1, GradeTag.GRADE2)
    assert Operation.MULTIPLICATION not in get_level_definition(3).allowed_operations
    assert Operation.MULTIPLICATION in get_level_definition(4).allowed_operations
    assert get_level_definition(10).grade_tags == (GradeTag.GRADE5, GradeTag.GRADE6)


def test_unknown_level() -> None:
    with pytest.raises(LevelNotFoundError):
        get_level_definition(11)
