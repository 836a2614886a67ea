"""spanflow: distributed tracing runtime."""

from spanflow.auto import get_tracer, init, is_initialized, stop_tracing
from spanflow.context import extract, get_current_span, inject
from spanflow.errors import ConfigError, ExportError, SpanflowError
from spanflow.instrumentation import traced
from spanflow.tracer import (
    SamplingPriority,
    Scope,
    Span,
    SpanContext,
    SpanTypes,
    TraceContext,
    Tracer,
)

__version__ = "0.3.0"

__all__ = [
    "__version__",
    "init",
    "get_tracer",
    "is_initialized",
    "stop_tracing",
    "inject",
    "extract",
    "get_current_span",
    "traced",
    "SamplingPriority",
    "Scope",
    "Span",
    "SpanContext",
    "SpanTypes",
    "TraceContext",
    "Tracer",
    "SpanflowError",
    "ConfigError",
    "ExportError",
]
