"""HTTP header propagation of span contexts."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, MutableMapping, Optional, Set, Tuple, Union

from opentelemetry.context import Context
from opentelemetry.propagators.textmap import (
    CarrierT,
    Getter,
    Setter,
    TextMapPropagator,
    default_setter,
)

from spanflow.context.context import get_active_scope, get_span_context, set_span_context
from spanflow.tracer.sampling import SamplingPriority
from spanflow.tracer.span_context import SpanContext
from spanflow.utils.helpers import format_id, parse_id

logger = logging.getLogger(__name__)

HTTP_HEADER_TRACE_ID = "x-datadog-trace-id"
HTTP_HEADER_PARENT_ID = "x-datadog-parent-id"
HTTP_HEADER_SAMPLING_PRIORITY = "x-datadog-sampling-priority"

Carrier = Union[Mapping[Any, Any], Iterable[Tuple[Any, Any]]]


def _text(value: Any) -> str:
    # ASGI and raw HTTP headers arrive as bytes
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return str(value)


class CaseInsensitiveGetter(Getter[Carrier]):
    """
    Read header values from a mapping or a sequence of (name, value) pairs.

    Names match case-insensitively. Values of repeated headers, and list
    values, are returned in the order they appear.
    """

    def get(self, carrier: Carrier, key: str) -> Optional[List[str]]:
        wanted = key.lower()
        values = []
        for name, value in _items(carrier):
            if _text(name).strip().lower() != wanted:
                continue
            if isinstance(value, (list, tuple)):
                values.extend(_text(item) for item in value)
            else:
                values.append(_text(value))
        return values or None

    def keys(self, carrier: Carrier) -> List[str]:
        return [_text(name) for name, _ in _items(carrier)]


def _items(carrier: Carrier) -> Iterable[Tuple[Any, Any]]:
    return carrier.items() if hasattr(carrier, "items") else carrier


case_insensitive_getter = CaseInsensitiveGetter()


class DatadogHeadersPropagator(TextMapPropagator):
    """
    Propagate span contexts in x-datadog-* headers.

    Ids and the sampling priority travel as decimal strings. The span id is
    sent under the parent id header: it is the parent of whatever span the
    receiver creates. Extract stores the remote context in the returned
    Context, read it back with get_span_context().
    """

    def extract(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        getter: Getter[CarrierT] = case_insensitive_getter,
    ) -> Context:
        if context is None:
            context = Context()

        try:
            trace_id = parse_id(_first(getter.get(carrier, HTTP_HEADER_TRACE_ID)))
            if trace_id is None:
                return context
            parent_id = parse_id(_first(getter.get(carrier, HTTP_HEADER_PARENT_ID)))
            priority = _first(getter.get(carrier, HTTP_HEADER_SAMPLING_PRIORITY))
        except (TypeError, ValueError):
            logger.debug("Ignoring unreadable propagation carrier of type %s", type(carrier).__name__)
            return context

        if parent_id is None:
            logger.debug("Propagated trace %s has no valid parent id", trace_id)
            return context

        span_context = SpanContext(
            trace_id=trace_id,
            span_id=parent_id,
            propagated_sampling_priority=SamplingPriority.parse(priority),
        )
        return set_span_context(span_context, context)

    def inject(
        self,
        carrier: CarrierT,
        context: Optional[Context] = None,
        setter: Setter[CarrierT] = default_setter,
    ) -> None:
        span_context = get_span_context(context)
        if span_context is None:
            scope = get_active_scope(context)
            if scope is None:
                return
            span_context = scope.span.context

        setter.set(carrier, HTTP_HEADER_TRACE_ID, format_id(span_context.trace_id))
        setter.set(carrier, HTTP_HEADER_PARENT_ID, format_id(span_context.span_id))
        priority = span_context.sampling_priority
        if priority is not None:
            setter.set(carrier, HTTP_HEADER_SAMPLING_PRIORITY, str(int(priority)))

    @property
    def fields(self) -> Set[str]:
        return {HTTP_HEADER_TRACE_ID, HTTP_HEADER_PARENT_ID, HTTP_HEADER_SAMPLING_PRIORITY}


def _first(values: Optional[List[str]]) -> Optional[str]:
    return values[0] if values else None


_propagator = DatadogHeadersPropagator()


def inject(context: SpanContext, carrier: MutableMapping[str, str]) -> None:
    """Write the context into carrier, dropping a stale sampling priority header."""
    carrier.pop(HTTP_HEADER_SAMPLING_PRIORITY, None)
    _propagator.inject(carrier, set_span_context(context, Context()))


def extract(carrier: Optional[Carrier]) -> Optional[SpanContext]:
    """
    Read a propagated context from carrier.

    Header names match case-insensitively and the first value wins for
    repeated headers. Returns None when the trace id or parent id is
    missing or malformed; callers then start a new trace.
    """
    if not carrier:
        return None
    return get_span_context(_propagator.extract(carrier, Context()))
