"""fluent-gwt list — one line per recorded test execution."""
from __future__ import annotations

from fluent_gwt.commands._store import open_store

_MARKS = {"passed": "✓", "failed": "✗", "skipped": "-"}


def cmd_list(cwd: str):
    store = open_store(cwd)
    try:
        records = store.get_records()
        if not records:
            print("No records yet.")
            return
        for record in records:
            mark = _MARKS.get(record.outcome, "?")
            print(f"{mark} {record.name}  [{record.stage.value}, {len(record.history)} steps]")
        print()
        passed = sum(1 for r in records if r.outcome == "passed")
        print(f"{passed}/{len(records)} passed")
    finally:
        store.close()
