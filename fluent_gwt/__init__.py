"""Fluent given/when/then acceptance tests on top of pytest."""
from fluent_gwt.engine import FluentPolicy, FluentTest, InvocationPrecondition, PreconditionRegistry
from fluent_gwt.errors import (
    DuplicatePreconditionError,
    FluentTestError,
    IncompleteProtocolError,
    NullRequestError,
    NullResponseError,
    NullResultError,
    NullValueError,
    ProtocolOrderError,
    SystemUnderTestError,
)
from fluent_gwt.store import TestRecorder
from fluent_gwt.types import RequestResponse, Stage

__all__ = [
    "DuplicatePreconditionError",
    "FluentPolicy",
    "FluentTest",
    "FluentTestError",
    "IncompleteProtocolError",
    "InvocationPrecondition",
    "NullRequestError",
    "NullResponseError",
    "NullResultError",
    "NullValueError",
    "PreconditionRegistry",
    "ProtocolOrderError",
    "RequestResponse",
    "Stage",
    "SystemUnderTestError",
    "TestRecorder",
]
