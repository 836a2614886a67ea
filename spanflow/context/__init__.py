"""Context utilities for spanflow."""

from spanflow.context.context import (
    get_active_scope,
    get_current_span,
    get_span_context,
    set_active_scope,
    set_span_context,
)
from spanflow.context.propagators import (
    HTTP_HEADER_PARENT_ID,
    HTTP_HEADER_SAMPLING_PRIORITY,
    HTTP_HEADER_TRACE_ID,
    CaseInsensitiveGetter,
    DatadogHeadersPropagator,
    extract,
    inject,
)

__all__ = [
    "get_active_scope",
    "set_active_scope",
    "get_current_span",
    "get_span_context",
    "set_span_context",
    "inject",
    "extract",
    "DatadogHeadersPropagator",
    "CaseInsensitiveGetter",
    "HTTP_HEADER_TRACE_ID",
    "HTTP_HEADER_PARENT_ID",
    "HTTP_HEADER_SAMPLING_PRIORITY",
]
