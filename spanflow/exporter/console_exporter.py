"""Console exporter for developer visibility."""

from __future__ import annotations

import sys
from typing import Iterable, List

from spanflow.tracer.span import Span


class ConsoleExporter:
    """Simple exporter that prints spans to stdout (or provided stream)."""

    def __init__(self, stream=None) -> None:
        self.stream = stream or sys.stdout

    def export(self, traces: Iterable[List[Span]]) -> bool:
        for trace in traces:
            for span in trace:
                line = (
                    f"[span] name={span.operation_name} resource={span.resource_name} "
                    f"service={span.service_name} trace_id={span.trace_id} "
                    f"span_id={span.span_id} parent_id={span.parent_id} "
                    f"error={int(span.error)} duration_ns={span.duration_ns}"
                )
                tags = span.tags
                if tags:
                    line += f" tags={tags}"
                metrics = span.metrics
                if metrics:
                    line += f" metrics={metrics}"
                print(line, file=self.stream)
        return True

    def shutdown(self) -> None:
        return None
