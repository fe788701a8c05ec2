from __future__ import annotations

from mathquest.clock import FakeClock
from mathquest.level_session import LevelSession
from mathquest.levels import AnswerMode, get_level_definition
from mathquest.player import LevelStatus, initial_level_progress, record_level_attempt


def test_same_seed_same_level_run() -> None:
    def prompts(seed: int) -> list[str]:
        session = LevelSession(get_level_definition(4), clock=FakeClock(), seed=seed)
        session.initialize()
        out = []
        for _ in range(10):
            q = session.current_question
            assert q is not None
            out.append(q.prompt)
            session.submit_answer(q.correct_answer + 1)
        return out

    assert prompts(77) == prompts(77)


def test_scripted_pass_then_progression() -> None:
    clock = FakeClock()
    level = get_level_definition(1)
    session = LevelSession(level, AnswerMode.NUMBER_ENTRY, clock=clock, seed=2024)
    session.initialize()

    # Miss every third question until the goal is met.
    outcome = None
    n = 0
    while outcome is None or not outcome.passed:
        clock.advance(2.0)
        q = session.current_question
        assert q is not None
        hit = n % 3 != 2
        outcome = session.submit_answer(q.correct_answer if hit else q.correct_answer + 1)
        n += 1

    result = session.end_session()
    assert result.passed
    assert not result.timed_out
    assert result.correct_answers == 10
    assert result.total_answered == 14
    assert result.score == 100
    assert result.accuracy == 71
    assert result.completion_time_ms == 28_000
    assert result.mean_rt_ms == 2000

    progress = record_level_attempt(initial_level_progress(), result)
    assert progress[1].status is LevelStatus.COMPLETED
    assert progress[1].best_score == 100
    assert progress[1].best_completion_time_ms == 28_000
    assert progress[2].status is LevelStatus.UNLOCKED
    assert progress[3].status is LevelStatus.LOCKED


def test_scripted_timeout() -> None:
    clock = FakeClock()
    level = get_level_definition(1)
    session = LevelSession(level, clock=clock, seed=8)
    session.initialize()

    for _ in range(5):
        clock.advance(10.0)
        q = session.current_question
        assert q is not None
        session.submit_answer(q.correct_answer)

    clock.advance(level.time_limit_seconds)
    result = session.end_session()
    assert result.timed_out
    assert not result.passed
    assert result.correct_answers == 5

    progress = record_level_attempt(initial_level_progress(), result)
    assert progress[1].attempts_count == 1
    assert progress[1].status is LevelStatus.UNLOCKED
    assert progress[2].status is LevelStatus.LOCKED
