from __future__ import annotations

from typing import Iterable, List, TypeVar

from lms_assess.data_models import Learner, LearningItem

ItemT = TypeVar("ItemT", bound=LearningItem)


def can_access(learner: Learner, item: LearningItem) -> bool:
    """
    Decide whether a learner may view or attempt a learning item.

    Public items are open to everyone. Private items are open only to the
    learners listed in ``assigned_to``; a missing list counts as empty, so a
    private item nobody was assigned to is visible to nobody.

    Administrators get no special treatment here. Callers that act on behalf
    of an administrator skip this check instead of relying on it.
    """
    if item.visibility == "public":
        return True
    return learner.id in item.assignees


def filter_accessible(learner: Learner, items: Iterable[ItemT]) -> List[ItemT]:
    """Return the items the learner can access, preserving input order."""
    return [item for item in items if can_access(learner, item)]
