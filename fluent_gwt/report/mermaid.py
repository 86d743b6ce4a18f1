"""Generate a Mermaid sequence diagram from captured inputs and outputs.

Captured keys of the form ``"<message> from <source> to <target>"`` become
arrows; any other key is not part of the diagram.
"""
from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fluent_gwt.types import TestRecord

_INTERACTION = re.compile(r"^(?P<message>.+?) from (?P<source>.+?) to (?P<target>.+?)(?: \d+)?$")


def _make_id(name: str) -> str:
    clean = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    return re.sub(r"_+", "_", clean).strip("_") or "participant"


def parse_interaction(key: str) -> tuple[str, str, str] | None:
    """Split a captured key into (message, source, target), or None."""
    m = _INTERACTION.match(key.strip())
    if not m:
        return None
    return m.group("message"), m.group("source"), m.group("target")


def generate_sequence_diagram(record: TestRecord) -> str:
    """Returns an empty string when nothing captured looks like an interaction."""
    ids: dict[str, str] = {}
    participants: list[str] = []
    arrows: list[str] = []

    for key in record.captured:
        interaction = parse_interaction(key)
        if not interaction:
            continue
        message, source, target = interaction
        for name in (source, target):
            if name not in ids:
                ids[name] = _make_id(name)
                participants.append(f"    participant {ids[name]} as {name}")
        # Responses travel back along the same lifelines, drawn dashed
        arrow = "-->>" if message.lower().startswith("response") else "->>"
        arrows.append(f"    {ids[source]}{arrow}{ids[target]}: {message.replace(':', ' ')}")

    if not arrows:
        return ""

    lines = ["sequenceDiagram"]
    lines.extend(participants)
    lines.extend(arrows)
    return "\n".join(lines)
