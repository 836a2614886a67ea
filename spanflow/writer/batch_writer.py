"""Batching trace writer with bounded queue and background flush."""

from __future__ import annotations

import logging
import threading
import time
from collections import deque
from typing import Deque, List, Optional

from spanflow.tracer.span import Span
from spanflow.writer.base import Writer

logger = logging.getLogger(__name__)


class BatchWriter(Writer):
    """
    Writer that queues completed traces and exports them in batches.

    enqueue() only appends to a bounded queue; a daemon thread drains it
    to the exporter. When the queue is full the oldest queued trace is
    dropped, so instrumented code never waits on the exporter.
    """

    def __init__(
        self,
        exporter=None,
        *,
        max_queue_size: int = 1000,
        max_export_batch_size: int = 100,
        schedule_delay_millis: int = 1000,
    ) -> None:
        self.exporter = exporter
        self.max_queue_size = max_queue_size
        self.max_export_batch_size = max_export_batch_size
        self.schedule_delay = schedule_delay_millis / 1000.0
        self.dropped_traces = 0

        self._queue: Deque[List[Span]] = deque(maxlen=max_queue_size)
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._shutdown = False
        self._worker = threading.Thread(target=self._worker_loop, name="spanflow-writer", daemon=True)
        self._worker.start()

    def enqueue(self, trace: List[Span]) -> None:
        """Queue one completed trace for export."""
        if self._shutdown:
            logger.debug("Writer is shut down, dropping trace of %d spans", len(trace))
            return

        with self._lock:
            # A full deque discards its oldest entry on append
            full = len(self._queue) == self.max_queue_size
            if full:
                self.dropped_traces += 1
            self._queue.append(trace)
        if full:
            logger.warning("Trace queue full (max_queue_size=%d), dropped a trace", self.max_queue_size)
        self._event.set()

    def force_flush(self, timeout: Optional[float] = None) -> None:
        """Export everything queued so far."""
        deadline = time.time() + timeout if timeout else None
        while True:
            flushed_any = self._flush_once()
            if not flushed_any:
                return
            if deadline and time.time() >= deadline:
                return

    def shutdown(self) -> None:
        """Stop the background worker, flush what is left and shut the exporter down."""
        if self._shutdown:
            return
        self._shutdown = True
        self._event.set()
        self._worker.join(timeout=self.schedule_delay * 2)
        self.force_flush()
        if self.exporter is not None:
            try:
                self.exporter.shutdown()
            except Exception:
                logger.exception("Exporter failed to shut down")

    @property
    def queue_size(self) -> int:
        with self._lock:
            return len(self._queue)

    # Internal
    def _worker_loop(self) -> None:
        """Background worker that periodically flushes traces."""
        while not self._shutdown:
            self._event.wait(timeout=self.schedule_delay)
            self._event.clear()
            while self._flush_once():
                pass

    def _flush_once(self) -> bool:
        """Flush one batch of traces."""
        traces = self._drain_queue(self.max_export_batch_size)
        if not traces:
            return False
        self._export(traces)
        return True

    def _drain_queue(self, limit: int) -> List[List[Span]]:
        """Drain traces from queue up to limit."""
        items: List[List[Span]] = []
        with self._lock:
            while self._queue and len(items) < limit:
                items.append(self._queue.popleft())
        return items

    def _export(self, traces: List[List[Span]]) -> None:
        if self.exporter is None:
            return
        try:
            self.exporter.export(traces)
        except Exception:
            # Export errors are logged, never raised into the worker loop
            logger.exception("Failed to export %d traces", len(traces))
