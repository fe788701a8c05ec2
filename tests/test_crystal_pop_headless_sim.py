from __future__ import annotations

from mathquest.clock import FakeClock
from mathquest.crystal_pop import CrystalPopConfig, CrystalPopSession
from mathquest.difficulty import DifficultyTier
from mathquest.player import PlayerStats, apply_crystal_pop_result, crystal_pop_skill_delta


def _run(seed: int) -> list[tuple[str, tuple[int, ...] | None]]:
    session = CrystalPopSession(CrystalPopConfig(DifficultyTier.MEDIUM, seed=seed), clock=FakeClock())
    session.initialize()
    dealt = []
    for _ in range(10):
        q = session.current_question
        assert q is not None
        dealt.append((q.prompt, q.multiple_choice_options))
        session.generate_next_question()
    return dealt


def test_same_seed_deals_same_questions() -> None:
    assert _run(123) == _run(123)


def test_scripted_run_until_timeout() -> None:
    clock = FakeClock()
    session = CrystalPopSession(CrystalPopConfig(DifficultyTier.HARD, duration_s=10.0, seed=555), clock=clock)
    session.initialize()

    # Pattern: three hits, one miss, repeated until the clock runs out.
    pattern = [True, True, True, False]
    i = 0
    while True:
        clock.advance(0.9)
        if session.is_expired():
            break
        q = session.current_question
        assert q is not None
        hit = pattern[i % len(pattern)]
        session.submit_answer(q.correct_answer if hit else q.correct_answer + 1, 900)
        session.generate_next_question()
        i += 1

    result = session.end_session()

    # 11 answers fit in 10 seconds at 0.9s each.
    assert result.questions_answered == 11
    assert result.correct_answers == 9
    # Each block of three hits scores 10 + 20 + 30.
    assert result.final_score == 60 * 3
    assert result.max_combo == 4
    assert result.gems_earned == 9
    assert result.accuracy == 82
    assert result.mean_rt_ms == 900
    assert result.median_rt_ms == 900

    player = apply_crystal_pop_result(PlayerStats(), result)
    assert crystal_pop_skill_delta(result) == 9 * 10 - 2 * 5
    assert player.skill_rating == 1080
    assert player.gems == 9
    assert player.total_questions_answered == 11
    assert player.success_rate == 82
