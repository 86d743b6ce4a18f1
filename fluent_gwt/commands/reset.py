"""fluent-gwt reset — delete all recorded test executions."""
from __future__ import annotations

from fluent_gwt.commands._store import record_db_path
from fluent_gwt.store.records import RecordStore


def cmd_reset(cwd: str):
    db_path = record_db_path(cwd)

    if not db_path.exists():
        print("Nothing to reset — no record database found.")
        return

    store = RecordStore(db_path)
    try:
        count = store.count()
        store.reset()
    finally:
        store.close()

    print(f"Deleted {count} record(s) from {db_path}.")
