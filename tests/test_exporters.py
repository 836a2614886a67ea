"""Tests for console, logging and OTLP exporters."""

import io
import logging
from unittest import mock

import pytest
from opentelemetry.sdk.trace.export import SpanExportResult
from opentelemetry.trace import StatusCode

from spanflow.errors import ExportError
from spanflow.exporter import ConsoleExporter, LoggingExporter, OTLPExporter
from spanflow.exporter.otlp_exporter import to_readable_span
from spanflow.tracer import SamplingPriority, SpanTypes


def _finished_trace(tracer, clock):
    with tracer.start_active("web.request") as root:
        root.span.resource_name = "GET /users"
        root.span.span_type = SpanTypes.WEB
        with tracer.start_active("db.query") as child:
            child.span.set_tag("db.name", "users")
            child.span.set_metric("rows", 3)
            clock.advance(250)
    return [root.span, child.span]


def test_console_exporter_prints_each_span(tracer, clock):
    stream = io.StringIO()
    trace = _finished_trace(tracer, clock)
    assert ConsoleExporter(stream).export([trace]) is True
    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert "name=web.request resource=GET /users" in lines[0]
    assert "tags={'db.name': 'users'}" in lines[1]
    assert "metrics={'rows': 3.0}" in lines[1]


def test_logging_exporter_logs_trace_summary(tracer, clock, caplog):
    trace = _finished_trace(tracer, clock)
    trace[0].trace_context.sampling_priority = SamplingPriority.USER_KEEP
    with caplog.at_level(logging.INFO, logger="spanflow.traces"):
        LoggingExporter().export([trace])
    assert "root=web.request spans=2 sampling_priority=USER_KEEP" in caplog.text


def test_to_readable_span(tracer, clock):
    root, child = _finished_trace(tracer, clock)
    child_readable = to_readable_span(child)
    root_readable = to_readable_span(root)

    assert child_readable.name == "db.query"
    assert child_readable.context.trace_id == child.trace_id
    assert child_readable.context.span_id == child.span_id
    assert child_readable.parent.span_id == root.span_id
    assert child_readable.attributes["db.name"] == "users"
    assert child_readable.attributes["rows"] == 3.0
    assert child_readable.end_time - child_readable.start_time == 250
    assert child_readable.resource.attributes["service.name"] == "test-service"

    assert root_readable.parent is None
    assert root_readable.attributes["spanflow.resource"] == "GET /users"
    assert root_readable.attributes["spanflow.span_type"] == "web"


def test_to_readable_span_error_and_rejected(tracer):
    span = tracer.start_span("op")
    span.set_exception(ValueError("nope"))
    span.set_tag("sampling.priority", "-1")
    span.finish()
    readable = to_readable_span(span)
    assert readable.status.status_code == StatusCode.ERROR
    assert readable.status.description == "nope"
    assert not readable.context.trace_flags.sampled
    assert readable.attributes["spanflow.sampling_priority"] == -1


def test_otlp_exporter_ships_finished_spans(tracer, clock):
    exporter = OTLPExporter(endpoint="http://localhost:4318/v1/traces", api_key="secret")
    exporter._otel_exporter = mock.Mock()
    exporter._otel_exporter.export.return_value = SpanExportResult.SUCCESS

    trace = _finished_trace(tracer, clock)
    unfinished = tracer.start_span("still-running")
    assert exporter.export([trace + [unfinished]]) is True

    shipped = exporter._otel_exporter.export.call_args[0][0]
    assert [s.name for s in shipped] == ["web.request", "db.query"]


def test_otlp_exporter_raises_on_failure(tracer, clock):
    exporter = OTLPExporter(endpoint="http://localhost:4318/v1/traces")
    exporter._otel_exporter = mock.Mock()
    exporter._otel_exporter.export.return_value = SpanExportResult.FAILURE

    with pytest.raises(ExportError):
        exporter.export([_finished_trace(tracer, clock)])
