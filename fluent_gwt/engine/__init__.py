from fluent_gwt.engine.orchestrator import FluentTest
from fluent_gwt.engine.policy import FluentPolicy
from fluent_gwt.engine.registry import InvocationPrecondition, PreconditionRegistry

__all__ = ["FluentPolicy", "FluentTest", "InvocationPrecondition", "PreconditionRegistry"]
