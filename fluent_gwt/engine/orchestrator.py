"""Core given/when/then orchestrator — a three-stage guarded state machine.

One instance drives exactly one test execution::

    test = FluentTest()
    test.given(StubWeatherProvider().with_description("light rain").for_city("London"))
    test.when(RequestWeather("London"))
    test.then(WeatherAssertions).has_text("There is light rain in London")
    test.verify()

Every call is checked against the current stage and a wrong-stage call
raises ProtocolOrderError straight away.
"""
from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, NoReturn

from fluent_gwt.engine.policy import FluentPolicy, display_name, kind_of
from fluent_gwt.engine.registry import InvocationPrecondition, PreconditionRegistry
from fluent_gwt.errors import (
    IncompleteProtocolError,
    NullRequestError,
    NullResponseError,
    NullResultError,
    ProtocolOrderError,
    SystemUnderTestError,
)
from fluent_gwt.store.recorder import TestRecorder
from fluent_gwt.types import Stage, StepRecord, TestRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from fluent_gwt.types import Invocation, Precondition, SystemUnderTest

logger = logging.getLogger(__name__)

_UNSET = object()


def _is_precondition(obj: Any) -> bool:
    return callable(getattr(obj, "prime", None))


def _is_invocation(obj: Any) -> bool:
    return callable(getattr(obj, "request", None)) and callable(getattr(obj, "response", None))


def _factory_name(factory: Any) -> str:
    return getattr(factory, "__qualname__", None) or kind_of(factory)


class FluentTest:
    def __init__(
        self,
        name: str = "",
        *,
        policy: FluentPolicy | None = None,
        recorder: TestRecorder | None = None,
        infrastructure: Any = None,
        infrastructure_factory: Callable[[], Any] | None = None,
        system_under_test: Callable[..., SystemUnderTest] | None = None,
        assertions: Callable[[Any], Any] | None = None,
        after_call: Callable[[Any], None] | None = None,
    ):
        self.name = name
        self.policy = policy or FluentPolicy()
        self.recorder = recorder if recorder is not None else TestRecorder()
        self.infrastructure = infrastructure
        self.infrastructure_factory = infrastructure_factory
        self.system_under_test_factory = system_under_test
        self.assertions_factory = assertions
        self.after_call = after_call

        self.registry = PreconditionRegistry(self.policy, self.recorder, self._resolve_infrastructure)
        self.stage = Stage.GIVEN
        self.history: list[StepRecord] = []
        self.request: Any = None
        self._result: Any = _UNSET
        self._pending_call: SystemUnderTest | None = None
        self._assertions: Any = _UNSET
        self._assertions_built_by: Any = None

    # ─── Given ───

    def given(self, precondition: Precondition | Invocation, name: str | None = None) -> Any:
        """Register a precondition (or a side-effecting invocation) before the 'when'."""
        self._require_given_stage()
        if self.registry.entries:
            self._fail("All of the 'given' steps after the first one should be 'and'")
        return self._do_given(precondition, name, "given")

    def and_given(self, precondition: Precondition | Invocation, name: str | None = None) -> Any:
        """Same as given(), for every precondition after the first one."""
        self._require_given_stage()
        return self._do_given(precondition, name, "and")

    # ─── When ───

    def when(self, invocation: Invocation | str | None = None) -> Any:
        """Invoke the system under test and keep its result for the assertions.

        Without an argument, builds the system under test with the
        ``system_under_test`` factory and returns it for parameterisation.
        A string names the caller and is handed to that factory.
        An object-style system under test (one with ``call``) is called at
        the first ``then`` rather than here.
        """
        if self.stage is not Stage.GIVEN:
            self._fail("There should only be one 'when', after the 'given' and before the 'then'")
        self.registry.flush()

        if invocation is None or isinstance(invocation, str):
            return self._when_system_under_test(self._build_system_under_test(invocation))
        if not _is_invocation(invocation):
            if callable(getattr(invocation, "call", None)):
                return self._when_system_under_test(invocation)
            self._fail(f"'when' needs an invocation or a system under test, got {type(invocation).__name__}")

        label = display_name(invocation)
        try:
            request = invocation.request()
        except Exception as e:
            raise self._wrap(label, e) from e
        if request is None:
            raise NullRequestError(label)

        try:
            response = invocation.response(request)
        except Exception as e:
            raise self._wrap(label, e) from e
        if response is None:
            raise NullResponseError(label)

        self.request = request
        self._result = response
        self._advance(Stage.WHEN, "when", label)
        return response

    # ─── Then ───

    def then(self, assertion_factory: Callable[[Any], Any] | None = None) -> Any:
        """Perform the first assertion; chain further ones with and_()."""
        if self.stage is Stage.GIVEN:
            self._fail("The initial 'then' should be after the 'when'")
        if self.stage is Stage.THEN and not self.policy.repeatable_then:
            self._fail("After the first 'then' you should use 'and'")

        factory = self._require_factory(assertion_factory)
        if self._pending_call is not None:
            self._call_system_under_test()

        self._advance(Stage.THEN, "then", _factory_name(factory))
        return self._build_assertions(factory)

    def and_then(self, assertion_factory: Callable[[Any], Any] | None = None) -> Any:
        """Same as then(), for every assertion after the first one."""
        if self.stage is not Stage.THEN:
            self._fail("The first 'then' should be a 'then' and after that you should use 'and'")

        factory = self._require_factory(assertion_factory)
        self.history.append(StepRecord(self.stage, "and", _factory_name(factory)))
        if self.policy.cache_assertions and factory is self._assertions_built_by:
            return self._assertions
        return self._build_assertions(factory)

    def and_(self, step: Any = None, name: str | None = None) -> Any:
        """'and' for both phases: a precondition or invocation before the
        'when', an assertion factory after the 'then'."""
        if _is_precondition(step) or _is_invocation(step):
            return self.and_given(step, name)
        return self.and_then(step)

    # ─── End of test ───

    def verify(self) -> None:
        """Fail unless the test reached 'then'. Only call after a passing test body."""
        if self.stage is not Stage.THEN:
            raise IncompleteProtocolError(self.stage.value)

    def __enter__(self) -> FluentTest:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is None:
            self.verify()

    # ─── Recording ───

    def add_to_givens(self, key: str, value: Any) -> None:
        self.recorder.add_to_givens(key, value)

    def add_to_captured_inputs_and_outputs(self, key: str, value: Any) -> None:
        self.recorder.add_to_captured_inputs_and_outputs(key, value)

    @property
    def result(self) -> Any:
        return None if self._result is _UNSET else self._result

    def to_record(self, outcome: str) -> TestRecord:
        return TestRecord(
            name=self.name,
            outcome=outcome,
            stage=self.stage,
            history=list(self.history),
            givens=dict(self.recorder.interesting_givens),
            captured=dict(self.recorder.captured_inputs_and_outputs),
            recorded_at=datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S"),
        )

    # ─── Private ───

    def _require_given_stage(self) -> None:
        if self.stage is not Stage.GIVEN:
            self._fail("The 'given' steps must be specified before the 'when' and 'then' steps")

    def _do_given(self, step: Any, name: str | None, action: str) -> Any:
        precondition = step
        if not _is_precondition(step) and _is_invocation(step):
            precondition = InvocationPrecondition(step)
        self.registry.register(precondition, name)
        self.history.append(StepRecord(self.stage, action, name or kind_of(precondition)))
        return step

    def _build_system_under_test(self, caller: str | None) -> SystemUnderTest:
        if self.system_under_test_factory is None:
            self._fail("'when()' without an invocation needs a system_under_test factory")
        if caller is None:
            return self.system_under_test_factory()
        return self.system_under_test_factory(caller)

    def _when_system_under_test(self, sut: SystemUnderTest) -> SystemUnderTest:
        self._pending_call = sut
        self._advance(Stage.WHEN, "when", display_name(sut))
        return sut

    def _call_system_under_test(self) -> None:
        sut = self._pending_call
        label = display_name(sut)
        try:
            result = sut.call(self._resolve_infrastructure())
        except Exception as e:
            raise self._wrap(label, e) from e
        if result is None:
            raise NullResultError(label)

        self._pending_call = None
        self._result = result
        self.history.append(StepRecord(self.stage, "call", label))
        if self.after_call is not None:
            self.after_call(result)

    def _require_factory(self, assertion_factory: Callable[[Any], Any] | None) -> Callable[[Any], Any]:
        factory = assertion_factory or self.assertions_factory
        if factory is None:
            self._fail("No assertion factory given and no default 'assertions' factory configured")
        return factory

    def _build_assertions(self, factory: Callable[[Any], Any]) -> Any:
        self._assertions = factory(self._result)
        self._assertions_built_by = factory
        return self._assertions

    def _resolve_infrastructure(self) -> Any:
        if self.infrastructure is None and self.infrastructure_factory is not None:
            self.infrastructure = self.infrastructure_factory()
        return self.infrastructure

    def _advance(self, stage: Stage, action: str, detail: str) -> None:
        logger.debug("%s: %s -> %s (%s)", self.name or "fluent test", self.stage.value, stage.value, detail)
        self.stage = stage
        self.history.append(StepRecord(stage, action, detail))

    def _wrap(self, label: str, error: Exception) -> SystemUnderTestError:
        logger.info("System under test '%s' raised %s", label, type(error).__name__)
        return SystemUnderTestError(label, error)

    def _fail(self, message: str) -> NoReturn:
        logger.debug("Protocol violation at stage %s: %s", self.stage.value, message)
        raise ProtocolOrderError(message)
