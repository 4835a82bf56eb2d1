from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .items import ItemType


class AnswerEntry(BaseModel):
    """One (question id, raw answer) pair inside a submission."""

    question_id: Optional[str] = None
    raw_answer: Any = None


class Submission(BaseModel):
    """Final answers for one item, handed over once any time limit has been enforced."""

    learner_id: str
    item_id: str
    item_type: ItemType
    answers: List[AnswerEntry] = Field(default_factory=list)
    time_spent: Optional[int] = Field(default=None, ge=0, description="Seconds.")
    learner_name: str = ""


class QuestionOutcome(BaseModel):
    """Graded outcome of a single question, kept for review screens."""

    model_config = ConfigDict(frozen=True)

    question_id: str
    raw_answer: Any = None
    is_correct: bool
    points_awarded: int = 0
    feedback: str = ""
    correct_answer: Optional[str] = None


class Result(BaseModel):
    """Persisted outcome of grading one submission. Never mutated after creation."""

    model_config = ConfigDict(frozen=True)

    learner_id: str
    learner_name: str = ""
    course_id: str
    item_id: str
    item_type: ItemType
    title: str = ""
    answers: List[QuestionOutcome] = Field(default_factory=list)
    score: int = Field(ge=0, le=100)
    max_score: int = Field(ge=0)
    submitted_at: datetime
    time_spent: Optional[int] = None

    @field_validator("submitted_at")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        """Store every submission time in UTC; naive values are taken to be UTC already."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @property
    def points_awarded(self) -> int:
        return sum(outcome.points_awarded for outcome in self.answers)


class ProgressEntry(BaseModel):
    """Per-course completion derived from the learner's results."""

    course_id: str
    completed_count: int = 0
    total_count: int = 0
    last_activity: Optional[datetime] = None

    @property
    def percent(self) -> int:
        if self.total_count == 0:
            return 0
        return (200 * self.completed_count + self.total_count) // (2 * self.total_count)


class ResultSummary(BaseModel):
    """Completion counts and average scores split by item type."""

    tests_completed: int = 0
    assignments_completed: int = 0
    test_average: float = 0.0
    assignment_average: float = 0.0
    overall_average: float = 0.0


class LeaderboardFilter(BaseModel):
    """Optional filters applied before ranking; unset fields match everything."""

    course_id: Optional[str] = None
    item_type: Optional[ItemType] = None
    name_query: Optional[str] = None


class LeaderboardRow(BaseModel):
    """One ranked line. Its rank is its position, never stored on the row."""

    model_config = ConfigDict(frozen=True)

    learner_id: str
    learner_name: str = ""
    course_id: Optional[str] = None
    item_id: Optional[str] = None
    item_type: Optional[ItemType] = None
    item_title: str = ""
    score: int
    completed_at: datetime
