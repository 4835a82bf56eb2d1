from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

QuestionType = Literal["mcq", "fill", "code"]
Visibility = Literal["public", "private"]
ItemKind = Literal["test", "assignment", "course", "class"]
ItemType = Literal["test", "assignment"]
Role = Literal["admin", "student"]


class JudgeCase(BaseModel):
    """Input/output pair forwarded to the external judge."""

    input: str
    output: str


class Question(BaseModel):
    """Immutable question definition owned by a test or assignment."""

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    type: QuestionType
    text: str
    options: Optional[List[str]] = None
    correct_answer: Optional[Union[str, List[str]]] = None
    points: Optional[int] = Field(default=None, ge=1)
    explanation: Optional[str] = None
    code_template: Optional[str] = None
    test_cases: List[JudgeCase] = Field(default_factory=list)

    @property
    def effective_points(self) -> int:
        """Points used for scoring; unset points count as one."""
        return self.points if self.points is not None else 1


class LearningItem(BaseModel):
    """Anything a learner can be granted access to (course, class, test, assignment)."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    kind: ItemKind
    visibility: Visibility = "public"
    assigned_to: Optional[List[str]] = None

    @property
    def assignees(self) -> frozenset[str]:
        return frozenset(self.assigned_to or ())


class GradableItem(LearningItem):
    """A test or assignment: the unit a Submission is graded against."""

    kind: ItemType
    course_id: str
    questions: List[Question] = Field(default_factory=list)
    time_limit: Optional[int] = Field(default=None, ge=1, description="Minutes, tests only.")
    due_date: Optional[datetime] = None

    @property
    def item_type(self) -> ItemType:
        return self.kind

    @property
    def max_points(self) -> int:
        return sum(question.effective_points for question in self.questions)

    @field_validator("questions")
    @classmethod
    def unique_question_keys(cls, value: List[Question]) -> List[Question]:
        """
        Reject items where two questions would receive the same answer.

        A question without an id is answered under its position, so an
        explicit id equal to another question's position collides too.
        """
        seen: set[str] = set()
        for position, question in enumerate(value):
            key = question.id if question.id is not None else str(position)
            if key in seen:
                raise ValueError(f"duplicate question key: {key}")
            seen.add(key)
        return value


class Learner(BaseModel):
    """Caller-supplied identity; this package never authenticates."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    role: Role = "student"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
