"""Recoverable conditions raised or logged by the assessment core.

None of these should take down grading for unrelated submissions; callers
catch them per request.
"""

from __future__ import annotations

from typing import Sequence


class AssessmentError(Exception):
    """Base class for every condition surfaced by this package."""


class AlreadySubmitted(AssessmentError):
    """A result already exists for this learner and item."""

    def __init__(self, learner_id: str, item_id: str):
        self.learner_id = learner_id
        self.item_id = item_id
        super().__init__(f"Learner {learner_id} has already submitted item {item_id}.")


class AccessDenied(AssessmentError):
    """The learner is not allowed to view or attempt the item."""

    def __init__(self, learner_id: str, item_id: str):
        self.learner_id = learner_id
        self.item_id = item_id
        super().__init__(f"Learner {learner_id} may not access item {item_id}.")


class MalformedItem(AssessmentError):
    """Authoring defect: nothing scorable, or a question without an answer key."""

    def __init__(self, item_id: str, defects: Sequence[str]):
        self.item_id = item_id
        self.defects = list(defects)
        super().__init__(f"Item {item_id} is malformed: " + "; ".join(self.defects))


class UnknownQuestionReference(AssessmentError):
    """A submitted answer names a question the item does not contain."""

    def __init__(self, item_id: str, question_id: str):
        self.item_id = item_id
        self.question_id = question_id
        super().__init__(f"Item {item_id} has no question {question_id}.")
