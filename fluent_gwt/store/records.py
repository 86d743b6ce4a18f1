"""SQLite-backed store of finished test executions, read back for reports."""
from __future__ import annotations

import json
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from fluent_gwt.types import Stage, StepRecord, TestRecord

INIT_SQL = """
CREATE TABLE IF NOT EXISTS test_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    outcome TEXT NOT NULL,
    stage TEXT NOT NULL,
    givens TEXT NOT NULL DEFAULT '{}',
    captured TEXT NOT NULL DEFAULT '{}',
    recorded_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS test_steps (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    record_id INTEGER NOT NULL REFERENCES test_records(id) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    stage TEXT NOT NULL,
    action TEXT NOT NULL,
    detail TEXT NOT NULL DEFAULT ''
);
"""


def _dumps(values: dict[str, Any]) -> str:
    # Recorded values are arbitrary objects; anything not JSON-native is kept as its str()
    return json.dumps(values, ensure_ascii=False, default=str)


class RecordStore:
    def __init__(self, db_path: str | Path):
        path = Path(db_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.db = sqlite3.connect(str(path))
        self.db.execute("PRAGMA journal_mode = WAL")
        self.db.execute("PRAGMA foreign_keys = ON")
        self.db.executescript(INIT_SQL)

    def save_record(self, record: TestRecord) -> None:
        """Store a record, replacing an earlier run of the same test."""
        self.db.execute("DELETE FROM test_records WHERE name = ?", (record.name,))
        cur = self.db.execute(
            """INSERT INTO test_records (name, outcome, stage, givens, captured, recorded_at)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                record.name,
                record.outcome,
                record.stage.value,
                _dumps(record.givens),
                _dumps(record.captured),
                record.recorded_at or datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S"),
            ),
        )
        self.db.executemany(
            "INSERT INTO test_steps (record_id, position, stage, action, detail) VALUES (?, ?, ?, ?, ?)",
            [
                (cur.lastrowid, i, step.stage.value, step.action, step.detail)
                for i, step in enumerate(record.history)
            ],
        )
        self.db.commit()

    def get_records(self, limit: int | None = None) -> list[TestRecord]:
        sql = "SELECT id, name, outcome, stage, givens, captured, recorded_at FROM test_records ORDER BY name"
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (limit,)
        return [self._to_record(row) for row in self.db.execute(sql, params).fetchall()]

    def find_record(self, name: str) -> TestRecord | None:
        """Exact name match first, then the single record whose name contains ``name``."""
        row = self.db.execute(
            "SELECT id, name, outcome, stage, givens, captured, recorded_at "
            "FROM test_records WHERE name = ?",
            (name,),
        ).fetchone()
        if row:
            return self._to_record(row)
        rows = self.db.execute(
            "SELECT id, name, outcome, stage, givens, captured, recorded_at "
            "FROM test_records WHERE instr(name, ?) > 0",
            (name,),
        ).fetchall()
        if len(rows) == 1:
            return self._to_record(rows[0])
        return None

    def count(self) -> int:
        return self.db.execute("SELECT COUNT(*) FROM test_records").fetchone()[0]

    def reset(self) -> None:
        self.db.execute("DELETE FROM test_steps")
        self.db.execute("DELETE FROM test_records")
        self.db.commit()

    def close(self) -> None:
        self.db.close()

    # ─── Private ───

    def _to_record(self, row) -> TestRecord:
        steps = self.db.execute(
            "SELECT stage, action, detail FROM test_steps WHERE record_id = ? ORDER BY position",
            (row[0],),
        ).fetchall()
        return TestRecord(
            name=row[1],
            outcome=row[2],
            stage=Stage(row[3]),
            history=[StepRecord(Stage(s[0]), s[1], s[2]) for s in steps],
            givens=json.loads(row[4]),
            captured=json.loads(row[5]),
            recorded_at=row[6],
        )
