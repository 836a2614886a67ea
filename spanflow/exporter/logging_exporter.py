"""Exporter that logs trace summaries."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from spanflow.tracer.span import Span


class LoggingExporter:
    """Logs one line per trace using the standard logging module."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("spanflow.traces")

    def export(self, traces: Iterable[List[Span]]) -> bool:
        for trace in traces:
            if not trace:
                continue
            root = trace[0].trace_context.root_span or trace[0]
            priority = trace[0].trace_context.sampling_priority
            self.logger.info(
                "[trace] trace_id=%s root=%s spans=%d sampling_priority=%s",
                trace[0].trace_id,
                root.operation_name,
                len(trace),
                priority.name if priority is not None else None,
            )
        return True

    def shutdown(self) -> None:
        return None
