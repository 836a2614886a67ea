"""Span implementation."""

from __future__ import annotations

import logging
import threading
import traceback
from typing import Any, Dict, Optional, TYPE_CHECKING

from spanflow.tracer import tags as tag_names
from spanflow.tracer.sampling import SamplingPriority
from spanflow.tracer.span_context import SpanContext
from spanflow.tracer.tags import TagDirective
from spanflow.utils.helpers import parse_bool

if TYPE_CHECKING:
    from spanflow.tracer.trace_context import TraceContext

logger = logging.getLogger(__name__)


class Span:
    """
    A logical unit of work in a trace.

    A span tracks the duration of an operation along with a resource name,
    a service name and user defined tags and metrics. Once finished, all
    further modifications are ignored.
    """

    def __init__(
        self,
        context: SpanContext,
        operation_name: str,
        start_time_ns: Optional[int] = None,
        resource_name: Optional[str] = None,
        span_type: Optional[str] = None,
    ) -> None:
        """
        Initialize span.

        Args:
            context: Identity of the span; must carry its TraceContext
            operation_name: Name of the operation, e.g. "web.request"
            start_time_ns: Explicit start time, defaults to the trace clock
            resource_name: Resource being operated on, e.g. "GET /users"
            span_type: One of SpanTypes
        """
        if context.trace_context is None:
            raise ValueError("Span requires a SpanContext attached to a TraceContext")

        self.context = context
        self.operation_name = operation_name
        self.resource_name = resource_name
        self.span_type = span_type
        self.service_name = context.service_name
        self.error = False

        self.start_time_ns = start_time_ns if start_time_ns is not None else self.trace_context.time_ns()
        self.duration_ns: Optional[int] = None

        self._lock = threading.Lock()
        self._finished = False
        self._tags: Dict[str, str] = {}
        self._metrics: Dict[str, float] = {}

    @property
    def trace_context(self) -> "TraceContext":
        return self.context.trace_context

    @property
    def trace_id(self) -> int:
        return self.context.trace_id

    @property
    def span_id(self) -> int:
        return self.context.span_id

    @property
    def parent_id(self) -> Optional[int]:
        return self.context.parent_id

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def is_root_span(self) -> bool:
        return self.trace_context.root_span is self

    @property
    def end_time_ns(self) -> Optional[int]:
        if self.duration_ns is None:
            return None
        return self.start_time_ns + self.duration_ns

    @property
    def tags(self) -> Dict[str, str]:
        """Snapshot of the span tags."""
        with self._lock:
            return dict(self._tags)

    @property
    def metrics(self) -> Dict[str, float]:
        """Snapshot of the span metrics."""
        with self._lock:
            return dict(self._metrics)

    def set_tag(self, key: str, value: Any) -> "Span":
        """
        Set a tag on the span, or remove it when value is None.

        Directive keys (sampling priority, manual keep, analytics) act on the
        trace instead of being stored.

        Returns:
            This span, to allow chaining
        """
        if self._finished:
            logger.debug("set_tag(%r) called after span %s was finished", key, self.span_id)
            return self

        if value is None:
            with self._lock:
                if not self._finished:
                    self._tags.pop(key, None)
            return self

        directive = TagDirective.for_key(key)
        if directive is None:
            with self._lock:
                if self._finished:
                    logger.debug("set_tag(%r) called after span %s was finished", key, self.span_id)
                else:
                    self._tags[key] = str(value)
            return self

        self._apply_directive(directive, value)
        return self

    def _apply_directive(self, directive: TagDirective, value: Any) -> None:
        if directive is TagDirective.SAMPLING_PRIORITY:
            priority = SamplingPriority.parse(value)
            if priority is not None:
                self.trace_context.sampling_priority = priority
            else:
                logger.debug("Ignoring invalid sampling priority %r", value)

        elif directive is TagDirective.MANUAL_KEEP:
            if parse_bool(value):
                self.trace_context.sampling_priority = SamplingPriority.USER_KEEP

        elif directive is TagDirective.ANALYTICS:
            flag = parse_bool(value)
            if flag is True:
                self.set_metric(tag_names.ANALYTICS, 1.0)
            elif flag is False:
                self.set_metric(tag_names.ANALYTICS, None)
            else:
                try:
                    rate = float(str(value).strip())
                except ValueError:
                    logger.debug("Ignoring invalid analytics sample rate %r", value)
                    return
                self.set_metric(tag_names.ANALYTICS, rate)

    def get_tag(self, key: str) -> Optional[str]:
        with self._lock:
            return self._tags.get(key)

    def set_metric(self, key: str, value: Optional[float]) -> "Span":
        """Set a numeric metric on the span, or remove it when value is None."""
        with self._lock:
            if self._finished:
                logger.debug("set_metric(%r) called after span %s was finished", key, self.span_id)
            elif value is None:
                self._metrics.pop(key, None)
            else:
                self._metrics[key] = float(value)
        return self

    def get_metric(self, key: str) -> Optional[float]:
        with self._lock:
            return self._metrics.get(key)

    def set_exception(self, error: Optional[BaseException]) -> None:
        """
        Mark the span as errored and record the exception details.

        For exception groups only the first nested exception is recorded.
        """
        if self._finished:
            logger.debug("set_exception called after span %s was finished", self.span_id)
            return

        self.error = True
        if error is None:
            return

        nested = getattr(error, "exceptions", None)
        if isinstance(nested, (tuple, list)) and nested and isinstance(nested[0], BaseException):
            error = nested[0]

        error_type = type(error)
        type_name = error_type.__qualname__
        if error_type.__module__ not in ("builtins", "__main__"):
            type_name = f"{error_type.__module__}.{type_name}"

        stack = "".join(traceback.format_exception(error_type, error, error.__traceback__))

        self.set_tag(tag_names.ERROR_MSG, str(error))
        self.set_tag(tag_names.ERROR_STACK, stack)
        self.set_tag(tag_names.ERROR_TYPE, type_name)

    def finish(self, finish_time_ns: Optional[int] = None) -> None:
        """
        Record the end time of the span and close it in its trace.

        Only the first call has any effect, whichever thread makes it.

        Args:
            finish_time_ns: Explicit end time, defaults to the trace clock
        """
        if finish_time_ns is None:
            finish_time_ns = self.trace_context.time_ns()

        should_close = False
        with self._lock:
            if self.resource_name is None:
                self.resource_name = self.operation_name
            if not self._finished:
                self.duration_ns = max(0, finish_time_ns - self.start_time_ns)
                self._finished = True
                should_close = True

        if should_close:
            self.trace_context.close_span(self)

    def dispose(self) -> None:
        """Alias of finish()."""
        self.finish()

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation of the span for exporters."""
        return {
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "parent_id": self.parent_id,
            "service": self.service_name,
            "name": self.operation_name,
            "resource": self.resource_name,
            "type": self.span_type,
            "start": self.start_time_ns,
            "duration": self.duration_ns,
            "error": 1 if self.error else 0,
            "meta": self.tags,
            "metrics": self.metrics,
        }

    def __str__(self) -> str:
        lines = [
            f"TraceId: {self.trace_id}",
            f"ParentId: {self.parent_id}",
            f"SpanId: {self.span_id}",
            f"ServiceName: {self.service_name}",
            f"OperationName: {self.operation_name}",
            f"Resource: {self.resource_name}",
            f"Type: {self.span_type}",
            f"Start: {self.start_time_ns}",
            f"Duration: {self.duration_ns}",
            f"Error: {self.error}",
            "Meta:",
        ]
        lines.extend(f"\t{k}:{v}" for k, v in self.tags.items())
        lines.append("Metrics:")
        lines.extend(f"\t{k}:{v}" for k, v in self.metrics.items())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"Span(operation_name={self.operation_name!r}, trace_id={self.trace_id}, "
            f"span_id={self.span_id}, parent_id={self.parent_id}, finished={self._finished})"
        )

    # Context manager support
    def __enter__(self) -> "Span":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc is not None:
            self.set_exception(exc)
        self.finish()
        return False
