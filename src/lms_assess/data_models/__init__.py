from .items import GradableItem, JudgeCase, Learner, LearningItem, Question
from .results import (
    AnswerEntry,
    LeaderboardFilter,
    LeaderboardRow,
    ProgressEntry,
    QuestionOutcome,
    Result,
    ResultSummary,
    Submission,
)

__all__ = [
    "AnswerEntry",
    "GradableItem",
    "JudgeCase",
    "LeaderboardFilter",
    "LeaderboardRow",
    "Learner",
    "LearningItem",
    "ProgressEntry",
    "Question",
    "QuestionOutcome",
    "Result",
    "ResultSummary",
    "Submission",
]
