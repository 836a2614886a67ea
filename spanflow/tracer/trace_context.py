"""Shared state for every span of one trace."""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, TYPE_CHECKING

from spanflow.tracer.sampling import SamplingPriority
from spanflow.utils.helpers import Clock

if TYPE_CHECKING:
    from spanflow.tracer.span import Span
    from spanflow.writer.base import Writer

logger = logging.getLogger(__name__)


class TraceContext:
    """
    Tracks the open spans of a trace and hands the trace to the writer
    once the last one closes.

    Flushing depends only on the open span count reaching zero, not on
    the root span having finished. A span started after the trace was
    flushed (a late async continuation, say) reopens the context and is
    later flushed on its own as a partial trace.
    """

    def __init__(
        self,
        trace_id: int,
        writer: Optional["Writer"] = None,
        clock: Optional[Clock] = None,
        sampling_priority: Optional[SamplingPriority] = None,
    ) -> None:
        self.trace_id = trace_id
        self.writer = writer
        self.clock = clock or Clock()

        self._lock = threading.Lock()
        self._spans: List["Span"] = []
        self._open_spans = 0
        self._root_span: Optional["Span"] = None
        self._sampling_priority = sampling_priority

    @property
    def root_span(self) -> Optional["Span"]:
        return self._root_span

    @property
    def open_span_count(self) -> int:
        with self._lock:
            return self._open_spans

    @property
    def sampling_priority(self) -> Optional[SamplingPriority]:
        with self._lock:
            return self._sampling_priority

    @sampling_priority.setter
    def sampling_priority(self, value: Optional[SamplingPriority]) -> None:
        with self._lock:
            self._sampling_priority = value

    def time_ns(self) -> int:
        return self.clock.time_ns()

    def add_span(self, span: "Span") -> None:
        """Register a newly created span of this trace."""
        with self._lock:
            if self._root_span is None:
                self._root_span = span
            self._spans.append(span)
            self._open_spans += 1

    def close_span(self, span: "Span") -> None:
        """
        Called exactly once per span, when it finishes.

        The decrement and the zero test happen under one lock so that
        concurrent closes flush the trace exactly once.
        """
        trace: List["Span"] = []
        with self._lock:
            if self._open_spans == 0:
                logger.debug("close_span called with no open spans (span_id=%s)", span.span_id)
                return
            self._open_spans -= 1
            if self._open_spans == 0:
                trace, self._spans = self._spans, []

        if not trace:
            return

        root = self._root_span
        if root is not None and not root.finished:
            logger.debug(
                "Flushing trace %s before its root span %r finished",
                self.trace_id,
                root.operation_name,
            )
        self._flush(trace)

    def _flush(self, trace: List["Span"]) -> None:
        if self.writer is None:
            logger.debug("No writer configured, dropping trace %s (%d spans)", self.trace_id, len(trace))
            return
        try:
            self.writer.enqueue(trace)
        except Exception:
            # Writer failures must not reach instrumented code
            logger.exception("Writer failed to accept trace %s", self.trace_id)
