"""OTLP exporter using OpenTelemetry OTLP HTTP exporter."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter as OTelOTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExportResult
from opentelemetry.trace import SpanContext, Status, StatusCode, TraceFlags

from spanflow.errors import ExportError
from spanflow.tracer.sampling import SamplingPriority
from spanflow.tracer.span import Span
from spanflow.utils.helpers import to_otel_trace_id

logger = logging.getLogger(__name__)


def to_readable_span(span: Span) -> ReadableSpan:
    """
    Convert a finished span to an OpenTelemetry ReadableSpan.

    Tags and metrics become attributes; resource name, span type and
    sampling priority are carried under "spanflow.*" attributes.
    """
    trace_id = to_otel_trace_id(span.trace_id)
    priority = span.trace_context.sampling_priority
    sampled = priority is None or priority > SamplingPriority.AUTO_REJECT
    flags = TraceFlags(TraceFlags.SAMPLED if sampled else TraceFlags.DEFAULT)

    context = SpanContext(trace_id=trace_id, span_id=span.span_id, is_remote=False, trace_flags=flags)
    parent = None
    if span.parent_id is not None:
        parent = SpanContext(trace_id=trace_id, span_id=span.parent_id, is_remote=False, trace_flags=flags)

    attributes: Dict[str, Any] = dict(span.tags)
    attributes.update(span.metrics)
    attributes["spanflow.resource"] = span.resource_name or span.operation_name
    if span.span_type:
        attributes["spanflow.span_type"] = span.span_type
    if priority is not None:
        attributes["spanflow.sampling_priority"] = int(priority)

    if span.error:
        status = Status(status_code=StatusCode.ERROR, description=span.get_tag("error.msg"))
    else:
        status = Status(status_code=StatusCode.UNSET)

    return ReadableSpan(
        name=span.operation_name,
        context=context,
        parent=parent,
        resource=Resource.create({"service.name": span.service_name or "unknown_service"}),
        attributes=attributes,
        status=status,
        start_time=span.start_time_ns,
        end_time=span.end_time_ns,
    )


class OTLPExporter:
    """
    OTLP exporter wrapper.

    Wraps OpenTelemetry's OTLP HTTP exporter so BatchWriter can hand it
    completed traces.
    """

    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: float = 10.0,
        headers: Optional[dict] = None,
    ) -> None:
        """
        Initialize OTLP exporter.

        Args:
            endpoint: OTLP endpoint URL (defaults to OTel default)
            api_key: Optional API key for authentication
            timeout: Request timeout in seconds
            headers: Optional additional headers
        """
        export_headers = dict(headers) if headers else {}
        if api_key:
            export_headers["Authorization"] = f"Bearer {api_key}"

        self._otel_exporter = OTelOTLPSpanExporter(
            endpoint=endpoint,
            timeout=timeout,
            headers=export_headers if export_headers else None,
        )

        self.endpoint = endpoint
        self.timeout = timeout

    def export(self, traces: Iterable[List[Span]]) -> bool:
        """
        Export traces using OTLP format.

        Raises:
            ExportError: if the collector rejected the batch
        """
        readable_spans = []
        for trace in traces:
            for span in trace:
                if not span.finished:
                    logger.debug("Skipping unfinished span %s", span.span_id)
                    continue
                readable_spans.append(to_readable_span(span))

        if not readable_spans:
            return True

        result = self._otel_exporter.export(readable_spans)
        if result != SpanExportResult.SUCCESS:
            raise ExportError("OTLP export failed", {"endpoint": self.endpoint, "spans": len(readable_spans)})
        return True

    def shutdown(self) -> None:
        """Shutdown the exporter."""
        self._otel_exporter.shutdown()
