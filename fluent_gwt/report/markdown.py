"""Render stored test records as Markdown documentation pages."""
from __future__ import annotations

import json
import re
from typing import TYPE_CHECKING, Any

from fluent_gwt.report.mermaid import generate_sequence_diagram

if TYPE_CHECKING:
    from fluent_gwt.types import TestRecord

_OUTCOME_MARKS = {"passed": "✓", "failed": "✗", "skipped": "-"}


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, indent=2, default=str)


def _title(name: str) -> str:
    """``tests/test_weather.py::test_light_rain_in_london`` -> ``Light rain in london``."""
    leaf = name.rsplit("::", 1)[-1]
    leaf = re.sub(r"^test_?", "", leaf)
    words = leaf.replace("_", " ").strip()
    return words[:1].upper() + words[1:] if words else name


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", name).strip("-").lower()
    return slug or "test"


def render_record(record: TestRecord) -> str:
    mark = _OUTCOME_MARKS.get(record.outcome, "?")
    lines = [f"# {_title(record.name)}", ""]
    lines.append(f"`{record.name}` {mark} {record.outcome} (recorded {record.recorded_at})")
    lines.append("")

    if record.history:
        lines.append("## Steps")
        lines.append("")
        for step in record.history:
            lines.append(f"- **{step.action}** {step.detail}".rstrip())
        lines.append("")

    if record.givens:
        lines.append("## Interesting givens")
        lines.append("")
        lines.append("| Given | Value |")
        lines.append("|---|---|")
        for key, value in record.givens.items():
            cell = _format_value(value).replace("\n", " ").replace("|", "\\|")
            lines.append(f"| {key} | {cell} |")
        lines.append("")

    if record.captured:
        lines.append("## Captured inputs and outputs")
        lines.append("")
        for key, value in record.captured.items():
            lines.append(f"### {key}")
            lines.append("")
            lines.append("```")
            lines.append(_format_value(value))
            lines.append("```")
            lines.append("")

    diagram = generate_sequence_diagram(record)
    if diagram:
        lines.append("## Sequence diagram")
        lines.append("")
        lines.append("```mermaid")
        lines.append(diagram)
        lines.append("```")
        lines.append("")

    return "\n".join(lines)


def render_index(records: list[TestRecord]) -> str:
    lines = ["# Acceptance tests", ""]
    passed = sum(1 for r in records if r.outcome == "passed")
    lines.append(f"{passed}/{len(records)} passed")
    lines.append("")
    for record in records:
        mark = _OUTCOME_MARKS.get(record.outcome, "?")
        lines.append(f"- {mark} [{_title(record.name)}]({slugify(record.name)}.md)")
    lines.append("")
    return "\n".join(lines)
