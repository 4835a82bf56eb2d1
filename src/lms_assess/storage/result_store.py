from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional

from lms_assess.data_models import Result
from lms_assess.errors import AlreadySubmitted

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    learner_id TEXT NOT NULL,
    item_id TEXT NOT NULL,
    item_type TEXT NOT NULL,
    course_id TEXT NOT NULL,
    score INTEGER NOT NULL,
    submitted_at TEXT NOT NULL,
    payload TEXT NOT NULL,
    UNIQUE(learner_id, item_id)
);

CREATE INDEX IF NOT EXISTS idx_results_course ON results(course_id);
"""


class ResultStore:
    """
    Append-only SQLite storage for graded results.

    The ``UNIQUE(learner_id, item_id)`` constraint is the source of truth for
    "one result per learner and item": when two grading requests race, the
    database rejects the second insert and it surfaces as ``AlreadySubmitted``.
    Rows are never updated or deleted.
    """

    def __init__(self, db_path: Path):
        """Create the database file and schema if they do not exist yet."""
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.executescript(SCHEMA)
            conn.commit()
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def add(self, result: Result) -> None:
        """Persist a new result; a second result for the same pair raises AlreadySubmitted."""
        conn = self._connect()
        try:
            with conn:
                conn.execute(
                    """INSERT INTO results
                    (learner_id, item_id, item_type, course_id, score, submitted_at, payload)
                    VALUES (?, ?, ?, ?, ?, ?, ?)""",
                    (
                        result.learner_id,
                        result.item_id,
                        result.item_type,
                        result.course_id,
                        result.score,
                        # Always UTC, so ORDER BY on the text is chronological.
                        result.submitted_at.isoformat(),
                        result.model_dump_json(),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            logger.warning(
                "Rejected duplicate result for learner %s on item %s",
                result.learner_id,
                result.item_id,
            )
            raise AlreadySubmitted(result.learner_id, result.item_id) from exc
        finally:
            conn.close()
        logger.info(
            "Stored result for learner %s on item %s (score=%d)",
            result.learner_id,
            result.item_id,
            result.score,
        )

    def get(self, learner_id: str, item_id: str) -> Optional[Result]:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT payload FROM results WHERE learner_id = ? AND item_id = ?",
                (learner_id, item_id),
            ).fetchone()
        finally:
            conn.close()
        return Result.model_validate_json(row["payload"]) if row else None

    def exists(self, learner_id: str, item_id: str) -> bool:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT 1 FROM results WHERE learner_id = ? AND item_id = ?",
                (learner_id, item_id),
            ).fetchone()
        finally:
            conn.close()
        return row is not None

    def list_results(
        self,
        learner_id: Optional[str] = None,
        course_id: Optional[str] = None,
        item_type: Optional[str] = None,
    ) -> List[Result]:
        """Return stored results matching every given filter, oldest first."""
        clauses: List[str] = []
        params: List[str] = []
        for column, value in (
            ("learner_id", learner_id),
            ("course_id", course_id),
            ("item_type", item_type),
        ):
            if value is not None:
                clauses.append(f"{column} = ?")
                params.append(value)
        query = "SELECT payload FROM results"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY submitted_at, id"
        conn = self._connect()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [Result.model_validate_json(row["payload"]) for row in rows]

    def count(self) -> int:
        conn = self._connect()
        try:
            return conn.execute("SELECT COUNT(*) FROM results").fetchone()[0]
        finally:
            conn.close()
