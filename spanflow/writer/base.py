"""Writer interface: the hand-off point for completed traces."""

from typing import List

from spanflow.tracer.span import Span


class Writer:
    """
    Receives fully closed traces from TraceContext.

    enqueue() must not block the caller; batching, retries and delivery
    are the writer's own concern.
    """

    def enqueue(self, trace: List[Span]) -> None:
        raise NotImplementedError

    def force_flush(self, timeout: float = None) -> None:
        pass

    def shutdown(self) -> None:
        pass


class InMemoryWriter(Writer):
    """Keeps every trace it receives. Used by tests and debugging sessions."""

    def __init__(self) -> None:
        self.traces: List[List[Span]] = []

    def enqueue(self, trace: List[Span]) -> None:
        self.traces.append(list(trace))

    def pop(self) -> List[List[Span]]:
        traces, self.traces = self.traces, []
        return traces
