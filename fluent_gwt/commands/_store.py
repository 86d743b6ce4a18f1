"""Locate the record database for CLI commands."""
from __future__ import annotations

import sys
from pathlib import Path

from fluent_gwt.config import DEFAULT_RECORD_DB, load_settings
from fluent_gwt.store.records import RecordStore


def record_db_path(cwd: str) -> Path:
    try:
        settings = load_settings(cwd=cwd)
    except ValueError as e:
        print(f"✗ Config error: {e}", file=sys.stderr)
        sys.exit(1)
    return settings.record_db or Path(cwd) / DEFAULT_RECORD_DB


def open_store(cwd: str) -> RecordStore:
    db_path = record_db_path(cwd)
    if not db_path.exists():
        print(f"No records found: {db_path} does not exist. Run pytest with record_db configured first.")
        sys.exit(1)
    return RecordStore(db_path)
