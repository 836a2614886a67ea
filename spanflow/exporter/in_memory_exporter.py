"""Exporter keeping exported traces in memory."""

import threading
from typing import Iterable, List

from spanflow.tracer.span import Span


class InMemoryExporter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._traces: List[List[Span]] = []
        self.is_shutdown = False

    def export(self, traces: Iterable[List[Span]]) -> bool:
        with self._lock:
            self._traces.extend(list(trace) for trace in traces)
        return True

    def get_finished_traces(self) -> List[List[Span]]:
        with self._lock:
            return list(self._traces)

    def clear(self) -> None:
        with self._lock:
            self._traces.clear()

    def shutdown(self) -> None:
        self.is_shutdown = True
