"""fluent-gwt show <test> — print one record as Markdown."""
from __future__ import annotations

import sys

from fluent_gwt.commands._store import open_store
from fluent_gwt.report import render_record


def cmd_show(name: str, cwd: str):
    store = open_store(cwd)
    try:
        record = store.find_record(name)
    finally:
        store.close()

    if record is None:
        print(f'No single record matches "{name}". Use `fluent-gwt list` to see recorded tests.', file=sys.stderr)
        sys.exit(1)
    print(render_record(record))
