"""Errors raised when a test breaks the given/when/then protocol.

All of them signal a defect in the test itself and are never recovered
internally; they propagate to pytest and fail the test.
"""
from __future__ import annotations


class FluentTestError(RuntimeError):
    pass


class ProtocolOrderError(FluentTestError):
    """A fluent call was made in the wrong stage."""


class DuplicatePreconditionError(FluentTestError):
    def __init__(self, kind: str, name: str = ""):
        self.kind = kind
        label = f"{name} ({kind})" if name and name != kind else kind
        super().__init__(f"The dependency '{label}' has already specified a 'given' step")


class NullValueError(FluentTestError):
    pass


class NullRequestError(NullValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' request was None")


class NullResponseError(NullValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' response was None")


class NullResultError(NullValueError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"'{name}' result was None")


class SystemUnderTestError(FluentTestError):
    """The system under test raised while being invoked; the cause is chained."""

    def __init__(self, name: str, cause: BaseException):
        self.name = name
        super().__init__(f"Error while invoking '{name}': {type(cause).__name__}: {cause}")


class IncompleteProtocolError(FluentTestError):
    def __init__(self, stage_name: str):
        self.stage_name = stage_name
        super().__init__(
            f"Each test needs at least a 'when' and a 'then' (ended at '{stage_name}')"
        )
