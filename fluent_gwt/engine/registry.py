"""Precondition registry — dedup by kind, prime immediately or one step behind."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fluent_gwt.engine.policy import FluentPolicy, display_name, kind_of
from fluent_gwt.errors import DuplicatePreconditionError, NullRequestError

if TYPE_CHECKING:
    from collections.abc import Callable

    from fluent_gwt.types import Invocation, Precondition, Recorder

logger = logging.getLogger(__name__)


@dataclass
class RegisteredPrecondition:
    precondition: Any
    kind: str
    name: str = ""
    primed: bool = False


class InvocationPrecondition:
    """Runs a side-effecting invocation as a 'given', discarding its result."""

    def __init__(self, invocation: Invocation):
        self.invocation = invocation
        self.kind = kind_of(invocation)

    def prime(self, *_args: Any) -> None:
        request = self.invocation.request()
        if request is None:
            raise NullRequestError(display_name(self.invocation))
        self.invocation.response(request)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InvocationPrecondition) and other.invocation == self.invocation

    def __hash__(self) -> int:
        return hash(self.kind)

    def __repr__(self) -> str:
        return f"InvocationPrecondition({self.invocation!r})"


class PreconditionRegistry:
    """Ordered preconditions of one test execution.

    ``infrastructure`` is a zero-argument callable returning the test
    infrastructure. It is called at priming time: preconditions get
    ``prime(recorder, infrastructure)`` when it returns something and a
    plain ``prime()`` otherwise, so infrastructure supplied after a
    precondition was registered is still seen under deferred priming.
    """

    def __init__(
        self,
        policy: FluentPolicy | None = None,
        recorder: Recorder | None = None,
        infrastructure: Callable[[], Any] | None = None,
    ):
        self.policy = policy or FluentPolicy()
        self.recorder = recorder
        self.infrastructure = infrastructure
        self._entries: list[RegisteredPrecondition] = []

    @property
    def entries(self) -> list[RegisteredPrecondition]:
        return list(self._entries)

    @property
    def kinds(self) -> list[str]:
        return [e.kind for e in self._entries]

    @property
    def primed(self) -> list[str]:
        return [e.kind for e in self._entries if e.primed]

    @property
    def pending(self) -> RegisteredPrecondition | None:
        if self._entries and not self._entries[-1].primed:
            return self._entries[-1]
        return None

    def register(self, precondition: Precondition, name: str | None = None) -> Precondition:
        kind = kind_of(precondition)
        self._check_duplicate(precondition, kind)

        # The previous precondition is fully configured once the next one arrives
        if self.policy.priming == "deferred":
            self.flush()

        entry = RegisteredPrecondition(precondition, kind, name or "")
        self._entries.append(entry)
        logger.debug("Registered precondition %s", kind)

        if self.policy.priming == "immediate":
            self._prime(entry)
        return precondition

    def flush(self) -> None:
        """Prime the pending precondition, if any."""
        entry = self.pending
        if entry is not None:
            self._prime(entry)

    # ─── Private ───

    def _check_duplicate(self, precondition: Any, kind: str) -> None:
        for entry in self._entries:
            if self.policy.dedup == "instance":
                duplicate = entry.precondition == precondition
            else:
                duplicate = entry.kind == kind
            if duplicate:
                raise DuplicatePreconditionError(kind, entry.name)

    def _prime(self, entry: RegisteredPrecondition) -> None:
        logger.debug("Priming %s", entry.kind)
        infrastructure = self.infrastructure() if self.infrastructure is not None else None
        if infrastructure is None:
            entry.precondition.prime()
        else:
            entry.precondition.prime(self.recorder, infrastructure)
        entry.primed = True
