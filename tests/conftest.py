from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from lms_assess.config.schema import PathsConfig, Settings
from lms_assess.data_models import GradableItem, Question, Result
from lms_assess.storage import ResultStore

T0 = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def t0():
    """Fixed reference time so orderings never depend on the wall clock."""
    return T0


@pytest.fixture
def letters_quiz():
    """Two one-point multiple-choice questions over the same three options."""
    return GradableItem(
        id="quiz-1",
        title="Letters",
        kind="test",
        course_id="c1",
        questions=[
            Question(
                id="q1",
                type="mcq",
                text="Which is the second letter?",
                options=["A", "B", "C"],
                correct_answer="1",
            ),
            Question(
                id="q2",
                type="mcq",
                text="Which is the first letter?",
                options=["A", "B", "C"],
                correct_answer="0",
            ),
        ],
    )


@pytest.fixture
def make_result():
    """Factory for stored results with sensible defaults."""

    def _make(
        learner_id: str,
        score: int,
        minutes: int = 0,
        *,
        item_id: str = "quiz-1",
        course_id: str = "c1",
        item_type: str = "test",
        learner_name: str | None = None,
        title: str = "",
        submitted_at: datetime | None = None,
    ) -> Result:
        return Result(
            learner_id=learner_id,
            learner_name=learner_name if learner_name is not None else learner_id.upper(),
            course_id=course_id,
            item_id=item_id,
            item_type=item_type,
            title=title,
            score=score,
            max_score=10,
            submitted_at=submitted_at or T0 + timedelta(minutes=minutes),
        )

    return _make


@pytest.fixture
def result_store(tmp_path):
    """Result store backed by a throwaway SQLite file."""
    return ResultStore(tmp_path / "results.sqlite")


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every path into the test's temporary directory."""
    return Settings(
        paths=PathsConfig(
            data_dir=tmp_path,
            results_db=tmp_path / "results.sqlite",
            logs_dir=tmp_path / "logs",
        )
    )
