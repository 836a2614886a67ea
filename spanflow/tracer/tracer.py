"""Tracer: entry point for creating spans and scopes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from opentelemetry.sdk.trace.id_generator import IdGenerator

from spanflow import runtime_config
from spanflow.tracer.scope import Scope, ScopeManager
from spanflow.tracer.span import Span
from spanflow.tracer.span_context import SpanContext
from spanflow.tracer.trace_context import TraceContext
from spanflow.utils.helpers import Clock, generate_id

logger = logging.getLogger(__name__)

Parent = Union[Span, SpanContext]


class Tracer:
    """
    Creates spans, links them to their parent and manages the active scope.
    """

    def __init__(
        self,
        writer: Optional[Any] = None,
        service_name: Optional[str] = None,
        clock: Optional[Clock] = None,
        id_generator: Optional[IdGenerator] = None,
        scope_manager: Optional[ScopeManager] = None,
    ) -> None:
        """
        Initialize tracer.

        Args:
            writer: Receives each completed trace through enqueue(trace)
            service_name: Default service name, falls back to runtime config
            clock: Time source for span timestamps
            id_generator: Source of trace and span ids
            scope_manager: Ambient scope storage
        """
        self.writer = writer
        self._service_name = service_name
        self.clock = clock or Clock()
        self.id_generator = id_generator
        self.scope_manager = scope_manager or ScopeManager()

    @property
    def service_name(self) -> str:
        return self._service_name or runtime_config.get_service_name()

    @property
    def active_scope(self) -> Optional[Scope]:
        """The scope active in the current logical flow, if any."""
        return self.scope_manager.active

    def create_span_context(
        self,
        parent: Optional[SpanContext] = None,
        service_name: Optional[str] = None,
    ) -> SpanContext:
        """
        Build the context of a new span.

        A parent attached to a local TraceContext shares it; a propagated
        parent starts a local TraceContext continuing its trace id and
        sampling priority; no parent starts a new trace.
        """
        span_id = generate_id(self.id_generator)

        if parent is None:
            trace_id = generate_id(self.id_generator)
            trace_context = TraceContext(trace_id, self.writer, self.clock)
            return SpanContext(
                trace_id=trace_id,
                span_id=span_id,
                service_name=service_name or self.service_name,
                trace_context=trace_context,
            )

        trace_context = parent.trace_context
        if trace_context is None:
            trace_context = TraceContext(
                parent.trace_id,
                self.writer,
                self.clock,
                sampling_priority=parent.sampling_priority,
            )

        return SpanContext(
            trace_id=parent.trace_id,
            span_id=span_id,
            parent_id=parent.span_id,
            service_name=service_name or parent.service_name or self.service_name,
            trace_context=trace_context,
        )

    def start_span(
        self,
        operation_name: str,
        child_of: Optional[Parent] = None,
        service_name: Optional[str] = None,
        start_time_ns: Optional[int] = None,
        ignore_active_scope: bool = False,
        tags: Optional[Dict[str, Any]] = None,
    ) -> Span:
        """
        Start a new span without activating it.

        Args:
            operation_name: Span operation name
            child_of: Explicit parent span or span context
            service_name: Overrides the inherited service name
            start_time_ns: Explicit start time
            ignore_active_scope: Start a new trace instead of using the active scope
            tags: Initial tags

        Returns:
            The new span, registered with its TraceContext
        """
        parent = self._resolve_parent(child_of, ignore_active_scope)
        context = self.create_span_context(parent, service_name)
        span = Span(context, operation_name, start_time_ns=start_time_ns)
        context.trace_context.add_span(span)

        for key, value in (tags or {}).items():
            span.set_tag(key, value)
        return span

    def start_active(
        self,
        operation_name: str,
        child_of: Optional[Parent] = None,
        service_name: Optional[str] = None,
        start_time_ns: Optional[int] = None,
        finish_on_close: bool = True,
        ignore_active_scope: bool = False,
        tags: Optional[Dict[str, Any]] = None,
    ) -> Scope:
        """
        Start a new span and make it active in the current logical flow.

        Returns:
            Scope to close (or use as a context manager) when the work is done
        """
        span = self.start_span(
            operation_name,
            child_of=child_of,
            service_name=service_name,
            start_time_ns=start_time_ns,
            ignore_active_scope=ignore_active_scope,
            tags=tags,
        )
        return self.scope_manager.activate(span, finish_on_close)

    def activate_span(self, span: Span, finish_on_close: bool = True) -> Scope:
        """Make an existing span the active one."""
        return self.scope_manager.activate(span, finish_on_close)

    def _resolve_parent(self, child_of: Optional[Parent], ignore_active_scope: bool) -> Optional[SpanContext]:
        if child_of is not None:
            if isinstance(child_of, Span):
                return child_of.context
            return child_of
        if ignore_active_scope:
            return None
        scope = self.active_scope
        if scope is None:
            return None
        return scope.span.context
