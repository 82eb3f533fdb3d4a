"""SQLite-backed generation log storage."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from pathlib import Path

from career_draft.logging.models import GenerationLog

DEFAULT_DB_PATH = Path.home() / ".career-draft" / "generation.db"


class GenerationLogStore:
    """SQLite-backed store for generation logs with WAL mode."""

    def __init__(self, db_path: str | Path = DEFAULT_DB_PATH):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS generation_logs (
                    id TEXT PRIMARY KEY,
                    org_id TEXT,
                    timestamp TEXT NOT NULL,
                    scope TEXT NOT NULL,
                    job_title TEXT,
                    model TEXT,
                    added_count INTEGER NOT NULL DEFAULT 0,
                    elapsed_seconds REAL NOT NULL DEFAULT 0.0,
                    total_input_tokens INTEGER NOT NULL DEFAULT 0,
                    total_output_tokens INTEGER NOT NULL DEFAULT 0,
                    estimated_cost_usd REAL NOT NULL DEFAULT 0.0,
                    success INTEGER NOT NULL DEFAULT 1,
                    error_message TEXT
                )
            """)

    def save_log(self, log: GenerationLog) -> None:
        """Persist a generation log entry."""
        with self._connect() as conn:
            conn.execute(
                """INSERT OR REPLACE INTO generation_logs
                   (id, org_id, timestamp, scope, job_title, model, added_count,
                    elapsed_seconds, total_input_tokens, total_output_tokens,
                    estimated_cost_usd, success, error_message)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    log.id,
                    log.org_id,
                    log.timestamp.isoformat(),
                    log.scope,
                    log.job_title,
                    log.model,
                    log.added_count,
                    log.elapsed_seconds,
                    log.total_input_tokens,
                    log.total_output_tokens,
                    log.estimated_cost_usd,
                    1 if log.success else 0,
                    log.error_message,
                ),
            )

    def get_logs(self, org_id: str | None = None, limit: int = 50) -> list[GenerationLog]:
        """Retrieve generation logs, newest first, optionally for one organization."""
        with self._connect() as conn:
            if org_id is not None:
                rows = conn.execute(
                    "SELECT * FROM generation_logs WHERE org_id = ? ORDER BY timestamp DESC LIMIT ?",
                    (org_id, limit),
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM generation_logs ORDER BY timestamp DESC LIMIT ?",
                    (limit,),
                ).fetchall()
        return [self._row_to_log(row) for row in rows]

    def get_monthly_stats(self) -> dict:
        """Get aggregated stats for the current month."""
        now = datetime.now()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
        with self._connect() as conn:
            row = conn.execute(
                """SELECT
                       COUNT(*) as total_runs,
                       SUM(added_count) as total_added,
                       SUM(total_input_tokens) as total_input,
                       SUM(total_output_tokens) as total_output,
                       SUM(estimated_cost_usd) as total_cost,
                       SUM(CASE WHEN success = 1 THEN 1 ELSE 0 END) as success_count
                   FROM generation_logs
                   WHERE timestamp >= ?""",
                (month_start.isoformat(),),
            ).fetchone()
        return {
            "total_runs": row[0] or 0,
            "total_added": row[1] or 0,
            "total_input_tokens": row[2] or 0,
            "total_output_tokens": row[3] or 0,
            "total_cost_usd": row[4] or 0.0,
            "success_rate": (row[5] / row[0] * 100) if row[0] else 0.0,
            "month": now.strftime("%Y-%m"),
        }

    @staticmethod
    def _row_to_log(row: tuple) -> GenerationLog:
        return GenerationLog(
            id=row[0],
            org_id=row[1],
            timestamp=datetime.fromisoformat(row[2]),
            scope=row[3],
            job_title=row[4],
            model=row[5],
            added_count=row[6],
            elapsed_seconds=row[7],
            total_input_tokens=row[8],
            total_output_tokens=row[9],
            estimated_cost_usd=row[10],
            success=bool(row[11]),
            error_message=row[12],
        )
