from __future__ import annotations

from typing import Iterable, List, Sequence

from lms_assess.assessment.access import can_access, filter_accessible
from lms_assess.data_models import (
    GradableItem,
    Learner,
    LearningItem,
    ProgressEntry,
    Result,
    ResultSummary,
)


def compute_progress(
    learner_id: str,
    course_id: str,
    items: Iterable[GradableItem],
    results: Iterable[Result],
) -> ProgressEntry:
    """
    Derive a learner's completion for one course from their results.

    Only tests and assignments of the course that the learner can access
    count toward the total; items hidden from the learner never inflate the
    denominator. An item is complete when the learner has a result for it.
    Nothing is persisted; call this per request.

    Parameters
    ----------
    learner_id : str
        Learner whose progress is computed.
    course_id : str
        Course to aggregate over. Items and results of other courses are ignored.
    items : Iterable[GradableItem]
        Gradable items, typically every test and assignment of the course.
    results : Iterable[Result]
        Results for the learner. Results of other learners are ignored.

    Returns
    -------
    ProgressEntry
        Counts plus the most recent submission time, or ``None`` when the
        learner has completed nothing in the course.
    """
    learner = Learner(id=learner_id)
    counted = {
        item.id
        for item in filter_accessible(learner, items)
        if item.course_id == course_id
    }
    latest_by_item = {}
    for result in results:
        if result.learner_id != learner_id or result.item_id not in counted:
            continue
        seen = latest_by_item.get(result.item_id)
        if seen is None or result.submitted_at > seen:
            latest_by_item[result.item_id] = result.submitted_at

    return ProgressEntry(
        course_id=course_id,
        completed_count=len(latest_by_item),
        total_count=len(counted),
        last_activity=max(latest_by_item.values()) if latest_by_item else None,
    )


def compute_course_overview(
    learner_id: str,
    courses: Iterable[LearningItem],
    items: Sequence[GradableItem],
    results: Sequence[Result],
) -> List[ProgressEntry]:
    """Progress for every course the learner can access, in course order."""
    learner = Learner(id=learner_id)
    return [
        compute_progress(learner_id, course.id, items, results)
        for course in courses
        if can_access(learner, course)
    ]


def _average(scores: List[int]) -> float:
    return round(sum(scores) / len(scores), 1) if scores else 0.0


def summarize_results(results: Iterable[Result]) -> ResultSummary:
    """Completed counts and average scores of a learner's results, by item type."""
    tests: List[int] = []
    assignments: List[int] = []
    for result in results:
        if result.item_type == "test":
            tests.append(result.score)
        else:
            assignments.append(result.score)
    return ResultSummary(
        tests_completed=len(tests),
        assignments_completed=len(assignments),
        test_average=_average(tests),
        assignment_average=_average(assignments),
        overall_average=_average(tests + assignments),
    )
