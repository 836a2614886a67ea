"""Tracer components for spanflow."""

from spanflow.tracer.sampling import SamplingPriority
from spanflow.tracer.scope import Scope, ScopeManager
from spanflow.tracer.span import Span
from spanflow.tracer.span_context import SpanContext
from spanflow.tracer.tags import SpanTypes, TagDirective
from spanflow.tracer.trace_context import TraceContext
from spanflow.tracer.tracer import Tracer

__all__ = [
    "SamplingPriority",
    "Scope",
    "ScopeManager",
    "Span",
    "SpanContext",
    "SpanTypes",
    "TagDirective",
    "TraceContext",
    "Tracer",
]
