"""Process-wide tracer setup: init(), get_tracer() and stop_tracing()."""

from __future__ import annotations

import atexit
import logging
import threading
from typing import Any, Optional

from spanflow import runtime_config
from spanflow.exporter import ConsoleExporter, LoggingExporter, OTLPExporter
from spanflow.tracer.tracer import Tracer
from spanflow.writer import BatchWriter, Writer

logger = logging.getLogger("spanflow.auto")

_lock = threading.Lock()
_tracer: Optional[Tracer] = None
_initialized = False
_atexit_registered = False


def init(
    service_name: Optional[str] = None,
    *,
    exporter: Optional[Any] = None,
    writer: Optional[Writer] = None,
    otlp_endpoint: Optional[str] = None,
    api_key: Optional[str] = None,
    enable_console_exporter: bool = False,
    load_env: bool = True,
) -> Tracer:
    """
    Configure the global tracer.

    Calling init() again returns the already configured tracer and logs a
    warning; call stop_tracing() first to reconfigure.

    Args:
        service_name: Default service name of spans
        exporter: Exporter used by the default BatchWriter
        writer: Custom writer, replaces the default BatchWriter
        otlp_endpoint: Ship traces with the OTLP exporter to this endpoint
        api_key: API key sent to the OTLP endpoint
        enable_console_exporter: Print spans to stdout
        load_env: Apply SPANFLOW_* environment variables first

    Raises:
        ConfigError: if the environment or arguments hold invalid settings
    """
    global _tracer, _initialized, _atexit_registered

    with _lock:
        if _initialized and _tracer is not None:
            logger.warning("spanflow.init() called more than once; returning the existing tracer")
            return _tracer

        if load_env:
            runtime_config.load_from_env()
        if service_name:
            runtime_config.set_service_name(service_name)

        if writer is None:
            if exporter is None:
                if otlp_endpoint:
                    exporter = OTLPExporter(endpoint=otlp_endpoint, api_key=api_key)
                elif enable_console_exporter:
                    exporter = ConsoleExporter()
                else:
                    exporter = LoggingExporter()
            writer = BatchWriter(
                exporter,
                max_queue_size=runtime_config.get_max_queue_size(),
                max_export_batch_size=runtime_config.get_max_export_batch_size(),
                schedule_delay_millis=runtime_config.get_schedule_delay_millis(),
            )

        if _tracer is None:
            _tracer = Tracer(writer=writer)
        else:
            # Tracers handed out by get_tracer() before init() start writing here
            _tracer.writer = writer
        _initialized = True
        if not _atexit_registered:
            atexit.register(stop_tracing)
            _atexit_registered = True

        if runtime_config.get_debug():
            logger.info(
                "spanflow initialised (service=%s, writer=%s)",
                runtime_config.get_service_name(),
                type(writer).__name__,
            )
        return _tracer


def get_tracer() -> Tracer:
    """
    Return the global tracer.

    Before init() this is a tracer without a writer: spans work, but
    completed traces are discarded. init() later attaches its writer to this
    same tracer, so references taken early keep working.
    """
    global _tracer
    with _lock:
        if _tracer is None:
            _tracer = Tracer()
        return _tracer


def is_initialized() -> bool:
    return _initialized


def stop_tracing(timeout: Optional[float] = None) -> None:
    """Flush and shut down the global writer. init() may be called again afterwards."""
    global _tracer, _initialized
    with _lock:
        tracer, _tracer = _tracer, None
        _initialized = False

    if tracer is None or tracer.writer is None:
        return
    try:
        tracer.writer.force_flush(timeout)
        tracer.writer.shutdown()
    except Exception:
        logger.exception("Error while shutting down the trace writer")
