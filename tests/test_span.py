"""Tests for Span tags, metrics, exceptions and finishing."""

import sys
import threading

import pytest

from spanflow.tracer import SamplingPriority
from spanflow.tracer import tags


class TestTags:
    def test_set_and_get_tag(self, tracer):
        span = tracer.start_span("db.query")
        span.set_tag("db.name", "users")
        assert span.get_tag("db.name") == "users"

    def test_tag_values_are_stored_as_strings(self, tracer):
        span = tracer.start_span("db.query")
        span.set_tag("rows", 42)
        assert span.get_tag("rows") == "42"

    def test_last_write_wins(self, tracer):
        span = tracer.start_span("op")
        span.set_tag("k", "a").set_tag("k", "b")
        assert span.get_tag("k") == "b"

    def test_none_removes_existing_tag(self, tracer):
        span = tracer.start_span("op")
        span.set_tag("k", "v")
        span.set_tag("k", None)
        assert span.get_tag("k") is None
        assert "k" not in span.tags

    def test_none_on_absent_tag_is_noop(self, tracer):
        span = tracer.start_span("op")
        span.set_tag("other", "v")
        span.set_tag("missing", None)
        assert span.tags == {"other": "v"}

    def test_missing_tag_is_none(self, tracer):
        assert tracer.start_span("op").get_tag("nope") is None

    def test_tags_frozen_after_finish(self, tracer):
        span = tracer.start_span("op")
        span.set_tag("before", "1")
        span.finish()
        span.set_tag("after", "1")
        span.set_tag("before", None)
        span.set_metric("m", 1.0)
        assert span.tags == {"before": "1"}
        assert span.metrics == {}


class TestDirectives:
    def test_sampling_priority_tag_sets_trace_priority(self, tracer):
        with tracer.start_active("root") as root_scope:
            with tracer.start_active("child") as child_scope:
                child_scope.span.set_tag(tags.SAMPLING_PRIORITY, "2")
                assert root_scope.span.context.sampling_priority == SamplingPriority.USER_KEEP
                assert child_scope.span.context.sampling_priority == SamplingPriority.USER_KEEP
            assert root_scope.span.get_tag(tags.SAMPLING_PRIORITY) is None

    def test_sampling_priority_accepts_negative(self, tracer):
        span = tracer.start_span("op")
        span.set_tag("sampling.priority", "-1")
        assert span.trace_context.sampling_priority == SamplingPriority.USER_REJECT

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("UserKeep", SamplingPriority.USER_KEEP),
            ("USER_KEEP", SamplingPriority.USER_KEEP),
            ("autoreject", SamplingPriority.AUTO_REJECT),
            (" User_Reject ", SamplingPriority.USER_REJECT),
        ],
    )
    def test_sampling_priority_accepts_member_names(self, tracer, value, expected):
        span = tracer.start_span("op")
        span.set_tag(tags.SAMPLING_PRIORITY, value)
        assert span.trace_context.sampling_priority == expected

    @pytest.mark.parametrize("value", ["5", "keep", "", "1.5"])
    def test_invalid_sampling_priority_is_ignored(self, tracer, value):
        span = tracer.start_span("op")
        span.set_tag("sampling.priority", value)
        assert span.trace_context.sampling_priority is None
        assert span.get_tag("sampling.priority") is None

    def test_manual_keep(self, tracer):
        span = tracer.start_span("op")
        span.set_tag(tags.MANUAL_KEEP, "true")
        assert span.trace_context.sampling_priority == SamplingPriority.USER_KEEP

    def test_manual_keep_false_leaves_priority_unset(self, tracer):
        span = tracer.start_span("op")
        span.set_tag(tags.MANUAL_KEEP, "false")
        assert span.trace_context.sampling_priority is None

    def test_analytics_boolean(self, tracer):
        span = tracer.start_span("op")
        span.set_tag(tags.ANALYTICS, "true")
        assert span.get_metric(tags.ANALYTICS) == 1.0
        span.set_tag(tags.ANALYTICS, False)
        assert span.get_metric(tags.ANALYTICS) is None

    def test_analytics_sample_rate(self, tracer):
        span = tracer.start_span("op")
        span.set_tag(tags.ANALYTICS, " 0.25 ")
        assert span.get_metric(tags.ANALYTICS) == 0.25
        assert span.get_tag(tags.ANALYTICS) is None

    def test_analytics_garbage_is_ignored(self, tracer):
        span = tracer.start_span("op")
        span.set_tag(tags.ANALYTICS, "sometimes")
        assert span.get_metric(tags.ANALYTICS) is None


class TestMetrics:
    def test_set_get_remove(self, tracer):
        span = tracer.start_span("op")
        span.set_metric("rows", 3)
        assert span.get_metric("rows") == 3.0
        span.set_metric("rows", None)
        assert span.get_metric("rows") is None


class TestSetException:
    def _raise(self, error):
        try:
            raise error
        except BaseException as exc:
            return exc

    def test_records_error_tags(self, tracer):
        span = tracer.start_span("op")
        span.set_exception(self._raise(ValueError("bad input")))
        assert span.error is True
        assert span.get_tag(tags.ERROR_MSG) == "bad input"
        assert span.get_tag(tags.ERROR_TYPE) == "ValueError"
        assert "ValueError: bad input" in span.get_tag(tags.ERROR_STACK)

    def test_none_only_sets_flag(self, tracer):
        span = tracer.start_span("op")
        span.set_exception(None)
        assert span.error is True
        assert span.tags == {}

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="ExceptionGroup requires Python 3.11")
    def test_exception_group_uses_first_cause(self, tracer):
        group = ExceptionGroup("many", [KeyError("first"), TypeError("second")])  # noqa: F821
        span = tracer.start_span("op")
        span.set_exception(group)
        assert span.get_tag(tags.ERROR_TYPE) == "KeyError"
        assert span.get_tag(tags.ERROR_MSG) == "'first'"

    def test_qualified_type_name_for_non_builtin(self, tracer):
        class CustomError(Exception):
            pass

        span = tracer.start_span("op")
        span.set_exception(CustomError("x"))
        assert span.get_tag(tags.ERROR_TYPE).endswith("CustomError")
        assert span.get_tag(tags.ERROR_TYPE).startswith(__name__)

    def test_context_manager_records_and_reraises(self, tracer):
        span = tracer.start_span("op")
        with pytest.raises(RuntimeError):
            with span:
                raise RuntimeError("boom")
        assert span.finished
        assert span.error
        assert span.get_tag(tags.ERROR_MSG) == "boom"


class TestFinish:
    def test_duration_from_clock(self, tracer, clock):
        span = tracer.start_span("op")
        clock.advance(500)
        span.finish()
        assert span.duration_ns == 500
        assert span.end_time_ns == span.start_time_ns + 500

    def test_second_finish_keeps_first_duration(self, tracer, clock):
        span = tracer.start_span("op")
        span.finish(span.start_time_ns + 100)
        span.finish(span.start_time_ns + 900)
        clock.advance(5000)
        span.dispose()
        assert span.duration_ns == 100

    def test_duration_never_negative(self, tracer):
        span = tracer.start_span("op")
        span.finish(span.start_time_ns - 1_000)
        assert span.duration_ns == 0

    def test_resource_defaults_to_operation_name(self, tracer):
        span = tracer.start_span("web.request")
        span.finish()
        assert span.resource_name == "web.request"

    def test_explicit_resource_is_kept(self, tracer):
        span = tracer.start_span("web.request")
        span.resource_name = "GET /users"
        span.finish()
        assert span.resource_name == "GET /users"

    def test_concurrent_finish_closes_once(self, tracer, writer):
        span = tracer.start_span("op")
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            span.finish()

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(writer.traces) == 1
        assert span.trace_context.open_span_count == 0


def test_str_lists_identity_and_tags(tracer):
    span = tracer.start_span("op")
    span.set_tag("k", "v")
    span.set_metric("m", 2)
    text = str(span)
    assert f"TraceId: {span.trace_id}" in text
    assert "OperationName: op" in text
    assert "\tk:v" in text
    assert "\tm:2.0" in text
