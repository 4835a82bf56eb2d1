from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence, TypeVar

from lms_assess.assessment import (
    aggregate_by_learner,
    can_access,
    compute_course_overview,
    compute_progress,
    filter_accessible,
    grade,
    leaderboard_to_csv,
    rank,
    summarize_results,
)
from lms_assess.config import Settings, load_settings
from lms_assess.data_models import (
    GradableItem,
    LeaderboardFilter,
    LeaderboardRow,
    Learner,
    LearningItem,
    ProgressEntry,
    Result,
    ResultSummary,
    Submission,
)
from lms_assess.errors import AccessDenied, AlreadySubmitted
from lms_assess.storage import ResultStore
from lms_assess.utils.logging import configure_logging

logger = logging.getLogger(__name__)

ItemT = TypeVar("ItemT", bound=LearningItem)


class AssessmentSystem:
    """
    Facade wiring the pure assessment functions to the result store.

    This is the thin adapter route handlers and the CLI call into. It owns the
    decisions the pure functions leave to their caller:

    - administrators bypass the access check entirely;
    - a learner gets exactly one graded result per item, enforced through the
      store's uniqueness constraint;
    - item documents and learner identity are supplied by the caller, never
      looked up here.

    Attributes
    ----------
    settings : Settings
        Loaded configuration (paths, logging, leaderboard limits).
    store : ResultStore
        SQLite-backed append-only result storage.

    Examples
    --------
    >>> system = AssessmentSystem.from_config()
    >>> result = system.submit(learner, submission, test)
    >>> rows = system.leaderboard(LeaderboardFilter(course_id=test.course_id))
    """

    def __init__(self, settings: Settings, store: Optional[ResultStore] = None):
        self.settings = settings
        configure_logging(settings.logging.level, settings.logging.use_json)
        self.store = store or ResultStore(settings.paths.results_db)

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> "AssessmentSystem":
        """Build a system from a YAML config file (or the defaults)."""
        return cls(load_settings(config_path))

    def visible_items(self, learner: Learner, items: Iterable[ItemT]) -> List[ItemT]:
        """Items the learner may see; administrators see everything."""
        if learner.is_admin:
            return list(items)
        return filter_accessible(learner, items)

    def submit(
        self,
        learner: Learner,
        submission: Submission,
        item: GradableItem,
        submitted_at: Optional[datetime] = None,
    ) -> Result:
        """
        Grade a final submission and persist its result.

        Raises
        ------
        AccessDenied
            The learner is not an administrator and cannot access the item.
        AlreadySubmitted
            A result for this learner and item exists, including one stored
            by a concurrent request between the check and the insert.
        ValueError
            The submission belongs to another learner or item.
        """
        if submission.learner_id != learner.id:
            raise ValueError(
                f"Submission for {submission.learner_id} cannot be made by {learner.id}."
            )
        if not learner.is_admin and not can_access(learner, item):
            logger.info("Denied submission from %s for item %s", learner.id, item.id)
            raise AccessDenied(learner.id, item.id)
        if self.store.exists(learner.id, item.id):
            logger.warning("Duplicate submission from %s for item %s", learner.id, item.id)
            raise AlreadySubmitted(learner.id, item.id)

        if not submission.learner_name and learner.name:
            submission = submission.model_copy(update={"learner_name": learner.name})
        result = grade(submission, item, submitted_at=submitted_at)
        self.store.add(result)
        return result

    def results_for(self, learner_id: str, course_id: Optional[str] = None) -> List[Result]:
        return self.store.list_results(learner_id=learner_id, course_id=course_id)

    def review(self, learner: Learner, item: GradableItem) -> Optional[Result]:
        """Stored result of the learner for an item they can access, if any."""
        if not learner.is_admin and not can_access(learner, item):
            raise AccessDenied(learner.id, item.id)
        return self.store.get(learner.id, item.id)

    def progress(
        self, learner_id: str, course_id: str, items: Iterable[GradableItem]
    ) -> ProgressEntry:
        return compute_progress(
            learner_id, course_id, items, self.results_for(learner_id, course_id)
        )

    def course_overview(
        self,
        learner_id: str,
        courses: Iterable[LearningItem],
        items: Sequence[GradableItem],
    ) -> List[ProgressEntry]:
        return compute_course_overview(
            learner_id, courses, items, self.results_for(learner_id)
        )

    def summary(self, learner_id: str) -> ResultSummary:
        return summarize_results(self.results_for(learner_id))

    def leaderboard(self, criteria: Optional[LeaderboardFilter] = None) -> List[LeaderboardRow]:
        return rank(self.store.list_results(), criteria)

    def overall_leaderboard(
        self, criteria: Optional[LeaderboardFilter] = None
    ) -> List[LeaderboardRow]:
        return aggregate_by_learner(
            self.store.list_results(),
            criteria,
            limit=self.settings.leaderboard.overall_limit,
        )

    def export_leaderboard_csv(
        self,
        criteria: Optional[LeaderboardFilter] = None,
        titles: Optional[Mapping[str, str]] = None,
        course_names: Optional[Mapping[str, str]] = None,
        *,
        overall: bool = False,
    ) -> str:
        """
        CSV download of the leaderboard.

        Item titles default to the title stored with each result; pass
        ``titles`` or ``course_names`` to override the display names.
        """
        rows = self.overall_leaderboard(criteria) if overall else self.leaderboard(criteria)
        return leaderboard_to_csv(rows, titles, course_names)
