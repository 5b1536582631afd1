"""SQLite implementation of the analysis store.

Each completed analysis is one row in the ``analyses`` table. Rows are never
updated; a fresh analysis of the same claim adds a new row and lookups by
claim pick the newest one still inside the TTL.
"""

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, Optional

from ...domain.models.analysis_result import AnalysisResult
from ...domain.models.claim import normalize_claim_text

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(days=7)

SCHEMA = """
CREATE TABLE IF NOT EXISTS analyses (
    id TEXT PRIMARY KEY,
    claim_text TEXT NOT NULL,
    claim_text_normalized TEXT NOT NULL,
    accuracy_score REAL NOT NULL,
    agreement_score REAL NOT NULL,
    disagreement_score REAL NOT NULL,
    neutral_score REAL NOT NULL,
    summary TEXT NOT NULL,
    summary_translations TEXT NOT NULL DEFAULT '{}',
    sources TEXT NOT NULL DEFAULT '[]',
    total_sources_retrieved INTEGER NOT NULL,
    analyzed_at TEXT NOT NULL,
    created_at REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_analyses_claim_created
    ON analyses (claim_text_normalized, created_at);
"""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SQLiteAnalysisStore:
    """Durable analysis cache backed by a single SQLite file.

    A connection is opened per operation, so one store can be shared by
    concurrent requests.
    """

    def __init__(
        self,
        db_path: str,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        """Initialize the store.

        Args:
            db_path: Path to the SQLite database file
            ttl: How long an entry can be served for its claim text
            clock: Returns the current time; replaced in tests
        """
        self._db_path = db_path
        self._ttl = ttl
        self._clock = clock

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create the table and index if they do not exist."""
        with self._connect() as conn:
            conn.executescript(SCHEMA)
            conn.commit()
        logger.info(f"💾 Analysis store ready at {self._db_path}")

    def _cutoff(self) -> float:
        return (self._clock() - self._ttl).timestamp()

    def get(self, claim_text: str) -> Optional[AnalysisResult]:
        """Newest unexpired result for the claim, flagged ``cached=True``."""
        with self._connect() as conn:
            row = conn.execute(
                """
                SELECT * FROM analyses
                WHERE claim_text_normalized = ? AND created_at > ?
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (normalize_claim_text(claim_text), self._cutoff()),
            ).fetchone()

        if row is None:
            return None
        return self._from_row(row).model_copy(update={"cached": True})

    def set(self, result: AnalysisResult) -> None:
        """Insert a new entry for the result's claim text."""
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO analyses (
                    id, claim_text, claim_text_normalized,
                    accuracy_score, agreement_score, disagreement_score, neutral_score,
                    summary, summary_translations, sources,
                    total_sources_retrieved, analyzed_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    result.id,
                    result.claim_text,
                    normalize_claim_text(result.claim_text),
                    result.accuracy_score,
                    result.agreement_score,
                    result.disagreement_score,
                    result.neutral_score,
                    result.summary,
                    json.dumps(result.summary_translations, ensure_ascii=False),
                    json.dumps(
                        [source.model_dump(mode="json") for source in result.sources],
                        ensure_ascii=False,
                    ),
                    result.total_sources_retrieved,
                    result.analyzed_at.isoformat(),
                    self._clock().timestamp(),
                ),
            )
            conn.commit()

    def get_by_id(self, analysis_id: str) -> Optional[AnalysisResult]:
        """Result with this id, regardless of age, flagged ``cached=False``."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM analyses WHERE id = ?",
                (analysis_id,),
            ).fetchone()
        return self._from_row(row) if row else None

    def delete_expired(self) -> int:
        """Delete entries at or past the TTL boundary."""
        with self._connect() as conn:
            cursor = conn.execute(
                "DELETE FROM analyses WHERE created_at <= ?",
                (self._cutoff(),),
            )
            conn.commit()
            deleted = cursor.rowcount

        if deleted:
            logger.info(f"🧹 Removed {deleted} expired analyses")
        return deleted

    def count(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM analyses").fetchone()[0]

    @staticmethod
    def _from_row(row: sqlite3.Row) -> AnalysisResult:
        return AnalysisResult(
            id=row["id"],
            claim_text=row["claim_text"],
            accuracy_score=row["accuracy_score"],
            agreement_score=row["agreement_score"],
            disagreement_score=row["disagreement_score"],
            neutral_score=row["neutral_score"],
            summary=row["summary"],
            summary_translations=json.loads(row["summary_translations"]),
            sources=json.loads(row["sources"]),
            total_sources_retrieved=row["total_sources_retrieved"],
            analyzed_at=datetime.fromisoformat(row["analyzed_at"]),
            cached=False,
        )
