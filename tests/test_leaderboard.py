"""Tests for leaderboard ranking, decoration and export."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import permutations

import pytest

from lms_assess.assessment import (
    aggregate_by_learner,
    leaderboard_to_csv,
    medal_for,
    number_rows,
    rank,
)
from lms_assess.data_models import LeaderboardFilter


def test_ties_go_to_the_earlier_completion(make_result, t0):
    """Scores 90, 90, 80 completed at t2, t1, t3 rank as (90, t1), (90, t2), (80, t3)."""
    results = [
        make_result("u1", 90, 20),
        make_result("u2", 90, 10),
        make_result("u3", 80, 30),
    ]
    rows = rank(results)
    assert [(row.score, row.completed_at) for row in rows] == [
        (90, t0 + timedelta(minutes=10)),
        (90, t0 + timedelta(minutes=20)),
        (80, t0 + timedelta(minutes=30)),
    ]
    assert [row.learner_id for row in rows] == ["u2", "u1", "u3"]


def test_ranking_does_not_depend_on_input_order(make_result):
    results = [
        make_result("u1", 70, 1),
        make_result("u2", 95, 2),
        make_result("u3", 70, 0),
        make_result("u4", 88, 3),
        make_result("u5", 70, 1, item_id="quiz-2"),
    ]
    expected = rank(results)
    for ordering in permutations(results):
        assert rank(list(ordering)) == expected


def test_filters_apply_before_ranking(make_result):
    results = [
        make_result("u1", 50, learner_name="Alice Johnson"),
        make_result("u2", 60, learner_name="Bob", course_id="c2"),
        make_result("u3", 70, learner_name="alina", item_id="a1", item_type="assignment"),
        make_result("u4", 80, learner_name="Carl"),
    ]
    by_course = rank(results, LeaderboardFilter(course_id="c2"))
    assert [row.learner_id for row in by_course] == ["u2"]

    by_type = rank(results, LeaderboardFilter(item_type="test"))
    assert [row.learner_id for row in by_type] == ["u4", "u2", "u1"]

    by_name = rank(results, LeaderboardFilter(name_query="ALI"))
    assert [row.learner_id for row in by_name] == ["u3", "u1"]

    assert rank(results, LeaderboardFilter(course_id="c1", item_type="assignment", name_query="carl")) == []


def test_rows_carry_item_context(make_result):
    row = rank([make_result("u1", 77, item_id="a9", course_id="c3", item_type="assignment")])[0]
    assert (row.course_id, row.item_id, row.item_type, row.score) == ("c3", "a9", "assignment", 77)


def test_number_rows_is_one_based(make_result):
    rows = rank([make_result("u1", 10), make_result("u2", 20)])
    numbered = number_rows(rows)
    assert [(position, row.learner_id) for position, row in numbered] == [(1, "u2"), (2, "u1")]


@pytest.mark.parametrize(
    "position, expected",
    [(1, "gold"), (2, "silver"), (3, "bronze"), (4, None), (0, None)],
)
def test_medal_for_top_three(position, expected):
    assert medal_for(position) == expected


def test_medal_positions_can_be_reduced():
    assert medal_for(1, medal_positions=1) == "gold"
    assert medal_for(2, medal_positions=1) is None


def test_aggregate_by_learner_sums_scores(make_result, t0):
    results = [
        make_result("u1", 90, 5),
        make_result("u1", 50, 40, item_id="quiz-2"),
        make_result("u2", 100, 10),
        make_result("u3", 100, 1),
        make_result("u3", 40, 2, item_id="quiz-2"),
    ]
    rows = aggregate_by_learner(results)
    assert [(row.learner_id, row.score) for row in rows] == [("u3", 140), ("u1", 140), ("u2", 100)]
    assert rows[0].completed_at == t0 + timedelta(minutes=2)
    assert rows[1].completed_at == t0 + timedelta(minutes=40)
    assert rows[0].item_id is None


def test_aggregate_by_learner_limits_rows(make_result):
    results = [make_result(f"u{idx}", idx) for idx in range(15)]
    rows = aggregate_by_learner(results, limit=10)
    assert len(rows) == 10
    assert rows[0].learner_id == "u14"
    assert len(aggregate_by_learner(results, limit=None)) == 15


def test_leaderboard_to_csv(make_result):
    rows = rank([make_result("u1", 90, learner_name="Ada"), make_result("u2", 95, learner_name="Linus")])
    text = leaderboard_to_csv(rows, titles={"quiz-1": "Letters"}, course_names={"c1": "Alphabet"})
    lines = text.splitlines()
    assert lines[0] == "Rank,Student Name,Course,Item Type,Item Title,Score,Completed At"
    assert lines[1] == "1,Linus,Alphabet,Test,Letters,95,\"Mar 01, 2024 09:00\""
    assert lines[2].startswith("2,Ada,")


def test_csv_title_falls_back_to_stored_item_title(make_result):
    rows = rank([make_result("u1", 90, learner_name="Ada", title="Letters")])
    assert leaderboard_to_csv(rows).splitlines()[1].startswith("1,Ada,c1,Test,Letters,90,")
    renamed = leaderboard_to_csv(rows, titles={"quiz-1": "Alphabet quiz"})
    assert ",Alphabet quiz," in renamed.splitlines()[1]


def test_naive_and_aware_completion_times_rank_together(make_result, t0):
    """Naive times count as UTC; other offsets are converted before comparing."""
    naive = make_result("u1", 90, submitted_at=datetime(2024, 3, 1, 8, 0))
    aware = make_result("u2", 90, submitted_at=t0)
    shifted = make_result("u3", 90, submitted_at=datetime(2024, 3, 1, 12, 30, tzinfo=timezone(timedelta(hours=5))))

    rows = rank([aware, shifted, naive])
    assert [row.learner_id for row in rows] == ["u3", "u1", "u2"]
    assert all(row.completed_at.tzinfo == timezone.utc for row in rows)

    overall = aggregate_by_learner([naive, aware, make_result("u1", 10, submitted_at=t0)])
    assert [(row.learner_id, row.score) for row in overall] == [("u1", 100), ("u2", 90)]
    assert overall[0].completed_at == t0


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
