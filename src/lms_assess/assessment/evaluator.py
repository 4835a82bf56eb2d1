from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from pydantic import BaseModel

from lms_assess.data_models import Question

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class Evaluation(BaseModel):
    """Outcome of checking one answer against one question."""

    is_correct: bool
    points_awarded: int
    selected_index: Optional[int] = None
    feedback: str = ""
    correct_answer: Optional[str] = None


def parse_option_index(value: Any) -> Optional[int]:
    """Read the leading integer of an answer key ("2", " 1", "0abc"); None if there is none."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _answer_keys(question: Question) -> List[str]:
    key = question.correct_answer
    if key is None:
        return []
    if isinstance(key, str):
        return [key]
    return list(key)


def selected_option_index(question: Question, raw_answer: Any) -> int:
    """Index of the first option equal to the answer, or -1 when nothing matches."""
    if not isinstance(raw_answer, str):
        return -1
    for idx, option in enumerate(question.options or []):
        if option == raw_answer:
            return idx
    return -1


def _display_answer(question: Question, correct_indices: List[int]) -> Optional[str]:
    options = question.options or []
    for idx in correct_indices:
        if 0 <= idx < len(options):
            return options[idx]
    keys = _answer_keys(question)
    return ", ".join(keys) if keys else None


def _feedback(is_correct: bool, correct_answer: Optional[str]) -> str:
    if is_correct:
        return "Correct answer"
    if correct_answer is None:
        return "Incorrect."
    return f"Incorrect. Correct answer: {correct_answer}"


def correct_option_indices(question: Question) -> List[int]:
    """Option indices named by the answer key; unparseable keys are dropped."""
    indices = (parse_option_index(key) for key in _answer_keys(question))
    return [idx for idx in indices if idx is not None]


def _evaluate_choice(question: Question, raw_answer: Any) -> Evaluation:
    correct_indices = correct_option_indices(question)
    selected = selected_option_index(question, raw_answer)
    # -1 is never a valid option index, so an unmatched answer cannot hit a key of "-1".
    is_correct = selected >= 0 and selected in correct_indices
    display = _display_answer(question, correct_indices)
    return Evaluation(
        is_correct=is_correct,
        points_awarded=question.effective_points if is_correct else 0,
        selected_index=selected,
        feedback=_feedback(is_correct, display),
        correct_answer=display,
    )


def _evaluate_text(question: Question, raw_answer: Any) -> Evaluation:
    keys = _answer_keys(question)
    if raw_answer is None:
        is_correct = False
    else:
        answer = raw_answer if isinstance(raw_answer, str) else str(raw_answer)
        is_correct = answer.strip() in keys
    display = ", ".join(keys) if keys else None
    return Evaluation(
        is_correct=is_correct,
        points_awarded=question.effective_points if is_correct else 0,
        feedback=_feedback(is_correct, display),
        correct_answer=display,
    )


def evaluate(question: Question, raw_answer: Any) -> Evaluation:
    """
    Score a single answer against its question definition.

    Multiple-choice answers are compared by option position: the answer is
    located in ``question.options`` and its index checked against the index
    stored in ``correct_answer``. Comparing option text instead would misgrade
    questions that repeat an option.

    Fill-in and code answers are trimmed and compared case-sensitively with the
    answer key, or checked for membership when the key is a list. There is no
    partial credit and no fuzzy matching.

    A missing answer is simply wrong. A question without an answer key is
    logged as an authoring defect and can never be answered correctly.
    """
    if question.correct_answer is None:
        logger.warning(
            "Question %s has no correct answer; it cannot award points.", question.id
        )
    if question.type == "mcq":
        return _evaluate_choice(question, raw_answer)
    return _evaluate_text(question, raw_answer)
