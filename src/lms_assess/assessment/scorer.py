from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from lms_assess.assessment.evaluator import correct_option_indices, evaluate
from lms_assess.data_models import GradableItem, QuestionOutcome, Result, Submission
from lms_assess.errors import MalformedItem, UnknownQuestionReference

logger = logging.getLogger(__name__)


def question_key(item: GradableItem, position: int) -> str:
    """
    Key under which the answer to the question at ``position`` is submitted.

    Questions authored before ids were assigned are addressed by their
    position in the item. Drop this fallback once all stored content carries
    stable ids; removing it earlier breaks grading of existing items.
    """
    question = item.questions[position]
    return question.id if question.id is not None else str(position)


def percent_score(total_points: int, max_points: int) -> int:
    """Whole-number percentage, halves rounded up; zero when nothing is scorable."""
    if max_points <= 0:
        return 0
    return (200 * total_points + max_points) // (2 * max_points)


def find_item_defects(item: GradableItem) -> List[str]:
    """List authoring problems that make an item partly or wholly ungradable."""
    defects: List[str] = []
    if not item.questions:
        defects.append("item has no questions")
    elif item.max_points == 0:
        defects.append("item has no scorable points")
    for position, question in enumerate(item.questions):
        label = question_key(item, position)
        if question.correct_answer is None:
            defects.append(f"question {label} has no correct answer")
            continue
        if question.type != "mcq":
            continue
        options = question.options or []
        if not options:
            defects.append(f"question {label} has no options")
            continue
        indices = correct_option_indices(question)
        if not any(0 <= idx < len(options) for idx in indices):
            defects.append(f"question {label} answer key does not name an option")
    return defects


def check_item(item: GradableItem) -> None:
    """Raise MalformedItem when the item has any authoring defect."""
    defects = find_item_defects(item)
    if defects:
        raise MalformedItem(item.id, defects)


def _index_answers(submission: Submission) -> Dict[str, Any]:
    answers: Dict[str, Any] = {}
    for position, entry in enumerate(submission.answers):
        key = entry.question_id if entry.question_id is not None else str(position)
        # First answer for a question wins; later duplicates are ignored.
        answers.setdefault(key, entry.raw_answer)
    return answers


def grade(
    submission: Submission,
    item: GradableItem,
    *,
    submitted_at: Optional[datetime] = None,
) -> Result:
    """
    Grade a final submission against its test or assignment.

    Every question of the item is evaluated in order, whether or not it was
    answered, so ``max_score`` is always the item's total points. Answers that
    reference questions the item does not contain are ignored. An item with
    nothing scorable yields a score of zero and is logged rather than raised,
    since it is an authoring problem rather than a learner error.

    The function is pure: it neither reads nor writes the result store. The
    caller is responsible for rejecting a second submission for the same
    learner and item before or while persisting.
    """
    if submission.item_id != item.id:
        raise ValueError(
            f"Submission for item {submission.item_id} cannot be graded against item {item.id}."
        )
    if submission.item_type != item.item_type:
        raise ValueError(
            f"Submission is a {submission.item_type} but item {item.id} is a {item.item_type}."
        )

    answers = _index_answers(submission)
    keys = [question_key(item, position) for position in range(len(item.questions))]
    for unknown in sorted(set(answers) - set(keys)):
        logger.info("%s Ignoring the answer.", UnknownQuestionReference(item.id, unknown))

    outcomes: List[QuestionOutcome] = []
    total_points = 0
    max_points = 0
    for key, question in zip(keys, item.questions):
        raw_answer = answers.get(key)
        evaluation = evaluate(question, raw_answer)
        total_points += evaluation.points_awarded
        max_points += question.effective_points
        outcomes.append(
            QuestionOutcome(
                question_id=key,
                raw_answer=raw_answer,
                is_correct=evaluation.is_correct,
                points_awarded=evaluation.points_awarded,
                feedback=evaluation.feedback,
                correct_answer=evaluation.correct_answer,
            )
        )

    if max_points == 0:
        logger.warning(
            "%s Scoring submission from %s as 0.",
            MalformedItem(item.id, find_item_defects(item)),
            submission.learner_id,
        )

    return Result(
        learner_id=submission.learner_id,
        learner_name=submission.learner_name,
        course_id=item.course_id,
        item_id=item.id,
        item_type=item.item_type,
        title=item.title,
        answers=outcomes,
        score=percent_score(total_points, max_points),
        max_score=max_points,
        submitted_at=submitted_at or datetime.now(timezone.utc),
        time_spent=submission.time_spent,
    )
