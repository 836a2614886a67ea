"""Immutable span identity."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from spanflow.tracer.sampling import SamplingPriority

if TYPE_CHECKING:
    from spanflow.tracer.trace_context import TraceContext


@dataclass(frozen=True)
class SpanContext:
    trace_id: int
    span_id: int
    parent_id: Optional[int] = None
    service_name: Optional[str] = None
    # Local spans share the TraceContext of their trace; propagated
    # contexts have none and carry the upstream priority instead.
    trace_context: Optional["TraceContext"] = field(default=None, compare=False, repr=False)
    propagated_sampling_priority: Optional[SamplingPriority] = None

    @property
    def sampling_priority(self) -> Optional[SamplingPriority]:
        if self.trace_context is not None:
            return self.trace_context.sampling_priority
        return self.propagated_sampling_priority

    def is_valid(self) -> bool:
        return bool(self.trace_id and self.span_id)
