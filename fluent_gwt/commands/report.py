"""fluent-gwt report <out-dir> — write Markdown documentation for every record."""
from __future__ import annotations

from pathlib import Path

from fluent_gwt.commands._store import open_store
from fluent_gwt.report import render_index, render_record, slugify


def cmd_report(out_dir: str, cwd: str):
    target = Path(cwd) / out_dir
    store = open_store(cwd)
    try:
        records = store.get_records()
    finally:
        store.close()

    target.mkdir(parents=True, exist_ok=True)
    for record in records:
        (target / f"{slugify(record.name)}.md").write_text(render_record(record), encoding="utf-8")
    (target / "index.md").write_text(render_index(records), encoding="utf-8")

    print(f"✓ Wrote {len(records)} record(s) to {target}")
