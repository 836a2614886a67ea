"""Ambient storage for the active scope, using OpenTelemetry's runtime context.

The OpenTelemetry runtime context is backed by contextvars, so the active
scope follows the logical flow: each thread and each asyncio task sees its
own value, and a coroutine resumed on another thread still sees the scope
it was running under.
"""

from contextvars import Token
from typing import Optional, TYPE_CHECKING

from opentelemetry import context as context_api
from opentelemetry.context import Context

if TYPE_CHECKING:
    from spanflow.tracer.scope import Scope
    from spanflow.tracer.span_context import SpanContext

_ACTIVE_SCOPE_KEY = context_api.create_key("spanflow-active-scope")
_SPAN_CONTEXT_KEY = context_api.create_key("spanflow-span-context")


def get_active_scope(context: Optional[Context] = None) -> Optional["Scope"]:
    """Return the scope active in context, or in the current logical flow."""
    return context_api.get_value(_ACTIVE_SCOPE_KEY, context)


def set_active_scope(scope: Optional["Scope"]) -> Token:
    """
    Make scope the active one for the current logical flow.

    Returns:
        Token of the underlying context variable change
    """
    return context_api.attach(context_api.set_value(_ACTIVE_SCOPE_KEY, scope))


def get_current_span():
    """Return the span of the active scope, if any."""
    scope = get_active_scope()
    if scope is None:
        return None
    return scope.span


def set_span_context(span_context: "SpanContext", context: Optional[Context] = None) -> Context:
    """Return a copy of context carrying span_context for propagation."""
    return context_api.set_value(_SPAN_CONTEXT_KEY, span_context, context)


def get_span_context(context: Optional[Context] = None) -> Optional["SpanContext"]:
    """Return the span context stored by set_span_context() or extract, if any."""
    return context_api.get_value(_SPAN_CONTEXT_KEY, context)
