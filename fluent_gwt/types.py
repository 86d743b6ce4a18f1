from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

# ─── Protocol stage ───

class Stage(enum.Enum):
    GIVEN = "given"
    WHEN = "when"
    THEN = "then"

# ─── Collaborator capabilities ───

@runtime_checkable
class Precondition(Protocol):
    """Setup unit primed before the system under test is invoked.

    Preconditions are primed with no arguments, or as
    ``prime(recorder, infrastructure)`` when the test carries infrastructure.
    An optional ``kind`` attribute overrides the class name for duplicate
    detection.
    """

    def prime(self, *args: Any) -> None: ...


@runtime_checkable
class Invocation(Protocol):
    """Request/response shaped call of the system under test."""

    def request(self) -> Any: ...

    def response(self, request: Any) -> Any: ...


@runtime_checkable
class SystemUnderTest(Protocol):
    """Object-style invocation: built by ``when()``, called at the first ``then``."""

    def call(self, infrastructure: Any) -> Any: ...


class Recorder(Protocol):
    def add_to_givens(self, key: str, value: Any) -> None: ...

    def add_to_captured_inputs_and_outputs(self, key: str, value: Any) -> None: ...

# ─── Values ───

@dataclass(frozen=True)
class RequestResponse:
    """A result that keeps the request it answered, for trace cross-referencing."""
    request: Any
    response: Any


@dataclass
class StepRecord:
    stage: Stage
    action: str  # given | when | then | and | call
    detail: str = ""


@dataclass
class TestRecord:
    """Snapshot of one finished test execution, as persisted for reports."""
    __test__ = False

    name: str
    outcome: str  # passed | failed | skipped
    stage: Stage
    history: list[StepRecord] = field(default_factory=list)
    givens: dict[str, Any] = field(default_factory=dict)
    captured: dict[str, Any] = field(default_factory=dict)
    recorded_at: str = ""
