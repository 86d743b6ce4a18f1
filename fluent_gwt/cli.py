"""Thin CLI router — dispatches to the record commands."""
from __future__ import annotations

import os
import sys

USAGE = """\
fluent-gwt — given/when/then acceptance test records

Usage:
  fluent-gwt list               List recorded test executions
  fluent-gwt show <test>        Print one record as Markdown (full node id or a unique part of it)
  fluent-gwt report <out-dir>   Write a Markdown page per record plus an index
  fluent-gwt reset              Delete all records

Records are written by pytest when fluent-gwt.yaml sets record_db
or when pytest runs with --fluent-gwt-record-db.
"""


def main():
    args = sys.argv[1:]
    cwd = os.getcwd()
    command = args[0] if args else None

    if command == "list":
        from fluent_gwt.commands.records import cmd_list
        cmd_list(cwd)

    elif command == "show":
        if len(args) < 2:
            print("Usage: fluent-gwt show <test>", file=sys.stderr)
            sys.exit(1)
        from fluent_gwt.commands.show import cmd_show
        cmd_show(args[1], cwd)

    elif command == "report":
        if len(args) < 2:
            print("Usage: fluent-gwt report <out-dir>", file=sys.stderr)
            sys.exit(1)
        from fluent_gwt.commands.report import cmd_report
        cmd_report(args[1], cwd)

    elif command == "reset":
        from fluent_gwt.commands.reset import cmd_reset
        cmd_reset(cwd)

    elif command in ("help", "--help", "-h", None):
        print(USAGE)

    else:
        print(f"Unknown command: {command}", file=sys.stderr)
        print(USAGE)
        sys.exit(1)
