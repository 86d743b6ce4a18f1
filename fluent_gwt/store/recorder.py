"""In-memory recording of interesting givens and captured inputs/outputs."""
from __future__ import annotations

from typing import Any


def _unique_key(existing: dict[str, Any], key: str) -> str:
    if key not in existing:
        return key
    n = 2
    while f"{key} {n}" in existing:
        n += 1
    return f"{key} {n}"


class TestRecorder:
    """Facts a test chose to document. Values are stored, never inspected.

    Adding an existing key keeps both values: the later one is stored under
    ``"<key> 2"``, ``"<key> 3"`` and so on.
    """

    __test__ = False

    def __init__(self):
        self.interesting_givens: dict[str, Any] = {}
        self.captured_inputs_and_outputs: dict[str, Any] = {}

    def add_to_givens(self, key: str, value: Any) -> None:
        self.interesting_givens[_unique_key(self.interesting_givens, key)] = value

    def add_to_captured_inputs_and_outputs(self, key: str, value: Any) -> None:
        key = _unique_key(self.captured_inputs_and_outputs, key)
        self.captured_inputs_and_outputs[key] = value

