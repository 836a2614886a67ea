"""Utility functions for spanflow."""

from spanflow.utils.helpers import (
    Clock,
    format_id,
    generate_id,
    parse_bool,
    parse_id,
    to_otel_trace_id,
)

__all__ = [
    "Clock",
    "generate_id",
    "format_id",
    "parse_id",
    "parse_bool",
    "to_otel_trace_id",
]
