from .access import can_access, filter_accessible
from .evaluator import Evaluation, evaluate
from .leaderboard import aggregate_by_learner, leaderboard_to_csv, medal_for, number_rows, rank
from .progress import compute_course_overview, compute_progress, summarize_results
from .scorer import check_item, find_item_defects, grade

__all__ = [
    "Evaluation",
    "aggregate_by_learner",
    "can_access",
    "check_item",
    "compute_course_overview",
    "compute_progress",
    "evaluate",
    "filter_accessible",
    "find_item_defects",
    "grade",
    "leaderboard_to_csv",
    "medal_for",
    "number_rows",
    "rank",
    "summarize_results",
]
