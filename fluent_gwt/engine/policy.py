"""Policy switches of the state machine, and naming of collaborators."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

DEDUP_CHOICES = ("kind", "instance")
PRIMING_CHOICES = ("immediate", "deferred")


@dataclass(frozen=True)
class FluentPolicy:
    dedup: str = "kind"  # kind | instance
    priming: str = "immediate"  # immediate | deferred
    cache_assertions: bool = False  # and_() reuses the assertions built by then()
    repeatable_then: bool = False  # a second then() is allowed and stays at THEN

    def __post_init__(self):
        if self.dedup not in DEDUP_CHOICES:
            raise ValueError(f"Unknown dedup policy {self.dedup!r}, expected one of {DEDUP_CHOICES}")
        if self.priming not in PRIMING_CHOICES:
            raise ValueError(f"Unknown priming policy {self.priming!r}, expected one of {PRIMING_CHOICES}")


def kind_of(obj: Any) -> str:
    """Stable identifier of a collaborator's kind: its ``kind`` attribute, else its class name."""
    kind = getattr(obj, "kind", None)
    if isinstance(kind, str) and kind:
        return kind
    return type(obj).__name__


def display_name(obj: Any) -> str:
    """Human readable name for error messages, e.g. ``the user (WhenTheWeatherIsRequested)``."""
    kind = kind_of(obj)
    name = getattr(obj, "name", None)
    if isinstance(name, str) and name and name != kind:
        return f"{name} ({kind})"
    return kind
