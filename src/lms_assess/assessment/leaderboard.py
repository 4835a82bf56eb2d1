from __future__ import annotations

import csv
import io
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from lms_assess.data_models import LeaderboardFilter, LeaderboardRow, Result

MEDALS = ("gold", "silver", "bronze")

CSV_HEADERS = ["Rank", "Student Name", "Course", "Item Type", "Item Title", "Score", "Completed At"]


def _matches(result: Result, criteria: LeaderboardFilter) -> bool:
    if criteria.course_id is not None and result.course_id != criteria.course_id:
        return False
    if criteria.item_type is not None and result.item_type != criteria.item_type:
        return False
    if criteria.name_query:
        return criteria.name_query.lower() in result.learner_name.lower()
    return True


def _order_key(row: LeaderboardRow) -> Tuple:
    # Full ties fall back to ids so the order never depends on input order.
    return (-row.score, row.completed_at, row.learner_id, row.item_id or "")


def rank(
    results: Iterable[Result],
    criteria: Optional[LeaderboardFilter] = None,
) -> List[LeaderboardRow]:
    """
    Order results into leaderboard rows, best first.

    Filters (course, item type, learner name substring) are applied before
    ordering. Higher scores rank first; on equal scores the earlier
    completion ranks higher.
    """
    criteria = criteria or LeaderboardFilter()
    rows = [
        LeaderboardRow(
            learner_id=result.learner_id,
            learner_name=result.learner_name,
            course_id=result.course_id,
            item_id=result.item_id,
            item_type=result.item_type,
            item_title=result.title,
            score=result.score,
            completed_at=result.submitted_at,
        )
        for result in results
        if _matches(result, criteria)
    ]
    return sorted(rows, key=_order_key)


def aggregate_by_learner(
    results: Iterable[Result],
    criteria: Optional[LeaderboardFilter] = None,
    limit: Optional[int] = 10,
) -> List[LeaderboardRow]:
    """One row per learner with summed scores and their latest completion time."""
    criteria = criteria or LeaderboardFilter()
    totals: Dict[str, LeaderboardRow] = {}
    for result in results:
        if not _matches(result, criteria):
            continue
        current = totals.get(result.learner_id)
        if current is None:
            totals[result.learner_id] = LeaderboardRow(
                learner_id=result.learner_id,
                learner_name=result.learner_name,
                score=result.score,
                completed_at=result.submitted_at,
            )
            continue
        totals[result.learner_id] = current.model_copy(
            update={
                "score": current.score + result.score,
                "completed_at": max(current.completed_at, result.submitted_at),
                "learner_name": current.learner_name or result.learner_name,
            }
        )
    ordered = sorted(totals.values(), key=_order_key)
    return ordered[:limit] if limit is not None else ordered


def number_rows(rows: Iterable[LeaderboardRow]) -> List[Tuple[int, LeaderboardRow]]:
    """Attach 1-based display ranks to already-ordered rows."""
    return list(enumerate(rows, start=1))


def medal_for(position: int, medal_positions: int = 3) -> Optional[str]:
    """Display decoration for a 1-based rank; only the top places get one."""
    if 1 <= position <= min(medal_positions, len(MEDALS)):
        return MEDALS[position - 1]
    return None


def leaderboard_to_csv(
    rows: Iterable[LeaderboardRow],
    titles: Optional[Mapping[str, str]] = None,
    course_names: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Render ranked rows as CSV text for download.

    ``titles`` and ``course_names`` map ids to display names. Items missing
    from ``titles`` fall back to the title stored with the result, then to
    the item id; unknown courses fall back to their id.
    """
    titles = titles or {}
    course_names = course_names or {}
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for position, row in number_rows(rows):
        writer.writerow(
            [
                position,
                row.learner_name,
                course_names.get(row.course_id or "", row.course_id or ""),
                (row.item_type or "").title(),
                titles.get(row.item_id or "", row.item_title or row.item_id or ""),
                row.score,
                row.completed_at.strftime("%b %d, %Y %H:%M"),
            ]
        )
    return buffer.getvalue()
