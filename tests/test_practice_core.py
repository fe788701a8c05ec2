from __future__ import annotations

import pytest

from mathquest.core import (
    NoActiveQuestionError,
    SessionAlreadyStartedError,
    SessionEndedError,
    SessionNotStartedError,
)
from mathquest.difficulty import GradeTag, Operation
from mathquest.levels import LevelDefinition, get_level_definition
from mathquest.math_generator import question_fingerprint
from mathquest.practice import PracticeModeSession


def _small_level(required: int = 3) -> LevelDefinition:
    return LevelDefinition(
        id="practice-test",
        level_number=1,
        title="Practice",
        grade_tags=(GradeTag.GRADE2,),
        allowed_operations=(Operation.ADDITION, Operation.SUBTRACTION),
        required_correct_answers=required,
        time_limit_seconds=1,
    )


def test_completes_on_goal_and_freezes() -> None:
    session = PracticeModeSession(_small_level(), seed=10)
    session.initialize()

    outcomes = []
    for _ in range(3):
        q = session.current_question
        assert q is not None
        outcomes.append(session.submit_answer(q.correct_answer))

    assert [o.completed for o in outcomes] == [False, False, True]
    assert session.is_completed()
    assert outcomes[-1].stats.score == 30
    assert outcomes[-1].stats.correct_answers == 3
    assert outcomes[-1].stats.accuracy == 100

    with pytest.raises(SessionEndedError):
        session.submit_answer(0)
    with pytest.raises(SessionEndedError):
        session.generate_next_question()


def test_misses_advance_without_completing() -> None:
    session = PracticeModeSession(_small_level(required=1), seed=4)
    session.initialize()
    first = session.current_question
    assert first is not None
    outcome = session.submit_answer(first.correct_answer + 1)
    assert not outcome.is_correct
    assert not outcome.completed
    assert outcome.stats.total_answered == 1
    assert outcome.stats.accuracy == 0
    assert session.current_question is not first


def test_practice_is_untimed_and_entry_only() -> None:
    # The level's one-second limit is ignored in practice mode.
    session = PracticeModeSession(_small_level(required=20), seed=6)
    session.initialize()
    seen = set()
    for _ in range(15):
        q = session.current_question
        assert q is not None
        assert q.multiple_choice_options is None
        seen.add(question_fingerprint(q))
        session.submit_answer(q.correct_answer + 1)
    assert len(seen) == 15
    assert not session.is_completed()


def test_lifecycle_errors() -> None:
    session = PracticeModeSession(get_level_definition(2), seed=1)
    with pytest.raises(NoActiveQuestionError):
        session.submit_answer(1)
    session.initialize()
    with pytest.raises(SessionAlreadyStartedError):
        session.initialize()


def test_generate_before_initialize_fails() -> None:
    session = PracticeModeSession(_small_level(), seed=3)
    with pytest.raises(SessionNotStartedError):
        session.generate_next_question()
    assert session.current_question is None
    assert session.stats().total_answered == 0
