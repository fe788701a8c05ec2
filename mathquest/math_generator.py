"""Arithmetic question generation.

Questions are produced one at a time from an operation and a difficulty tier.
Every random draw goes through an injected ``SeededRng`` so a session seeded
with the same value deals the same stream of questions.  Only the question
``id`` is drawn outside the seeded stream; it must be unique regardless of
seed.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass

from .core import SeededRng
from .difficulty import (
    DifficultyTier,
    GradeTag,
    Operation,
    default_grade_for_difficulty,
    number_range,
)

HARD_MULTIPLIER_CAP = 12
DISTRACTOR_COUNT = 3
MIN_DISTRACTOR_SPREAD = 5

_SYMBOLS: dict[Operation, str] = {
    Operation.ADDITION: "+",
    Operation.SUBTRACTION: "−",  # Unicode minus, not hyphen
    Operation.MULTIPLICATION: "×",
}


@dataclass(frozen=True, slots=True)
class MathQuestion:
    id: str
    operation: Operation
    grade_tag: GradeTag
    operand1: int
    operand2: int
    correct_answer: int
    prompt: str
    difficulty: DifficultyTier
    multiple_choice_options: tuple[int, ...] | None = None


def _new_question_id() -> str:
    return f"q_{uuid.uuid4().hex}"


def format_prompt(operation: Operation, operand1: int, operand2: int) -> str:
    return f"{operand1} {_SYMBOLS[operation]} {operand2} = ?"


def question_fingerprint(question: MathQuestion) -> str:
    """Composite key used to keep a question from repeating within a session."""
    return (
        f"{question.grade_tag.value}|{question.operation.value}|"
        f"{question.operand1}|{question.operand2}|{question.correct_answer}"
    )


def generate_distractors(correct_answer: int, rng: SeededRng, count: int = DISTRACTOR_COUNT) -> list[int]:
    """Return ``count`` distinct non-negative wrong answers close to the correct one."""
    spread = max(MIN_DISTRACTOR_SPREAD, abs(correct_answer) * 0.5)
    lo = math.ceil(max(0, correct_answer - spread))
    hi = math.ceil(correct_answer + spread)

    distractors: list[int] = []
    while len(distractors) < count:
        candidate = rng.randint(lo, hi)
        if candidate != correct_answer and candidate >= 0 and candidate not in distractors:
            distractors.append(candidate)
    return distractors


def generate_question(
    operation: Operation,
    difficulty: DifficultyTier,
    multiple_choice: bool = False,
    *,
    rng: SeededRng,
    grade_tag: GradeTag | None = None,
) -> MathQuestion:
    """Generate a single question for ``operation`` at ``difficulty``.

    Subtraction never goes negative (operand2 is drawn from [min, operand1]).
    Multiplication caps operand2 at 12 on the hard tier to keep products
    manageable.  With ``multiple_choice`` the question carries four shuffled
    options, exactly one of them correct.

    Raises:
        ValueError: if ``operation`` is not a known operation.
    """
    # Raw values from a deserialized catalog are accepted.
    operation = Operation(operation)
    difficulty = DifficultyTier(difficulty)

    rng_range = number_range(difficulty)
    lo, hi = rng_range.min, rng_range.max

    if operation is Operation.ADDITION:
        operand1 = rng.randint(lo, hi)
        operand2 = rng.randint(lo, hi)
        correct = operand1 + operand2
    elif operation is Operation.SUBTRACTION:
        operand1 = rng.randint(lo, hi)
        operand2 = rng.randint(lo, operand1)
        correct = operand1 - operand2
    elif operation is Operation.MULTIPLICATION:
        operand2_max = HARD_MULTIPLIER_CAP if difficulty is DifficultyTier.HARD else hi
        operand1 = rng.randint(lo, hi)
        operand2 = rng.randint(lo, min(operand2_max, hi))
        correct = operand1 * operand2
    else:
        raise ValueError(f"Unknown operation: {operation!r}")

    options: tuple[int, ...] | None = None
    if multiple_choice:
        choices = [correct, *generate_distractors(correct, rng)]
        rng.shuffle(choices)
        options = tuple(choices)

    return MathQuestion(
        id=_new_question_id(),
        operation=operation,
        grade_tag=grade_tag if grade_tag is not None else default_grade_for_difficulty(difficulty),
        operand1=operand1,
        operand2=operand2,
        correct_answer=correct,
        prompt=format_prompt(operation, operand1, operand2),
        difficulty=difficulty,
        multiple_choice_options=options,
    )


def generate_questions(
    operation: Operation,
    difficulty: DifficultyTier,
    count: int = 1,
    multiple_choice: bool = False,
    *,
    rng: SeededRng,
) -> list[MathQuestion]:
    return [generate_question(operation, difficulty, multiple_choice, rng=rng) for _ in range(count)]
