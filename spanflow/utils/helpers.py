"""Helper functions for ids and timestamps."""

from __future__ import annotations

import time
from typing import Optional

from opentelemetry.sdk.trace.id_generator import IdGenerator, RandomIdGenerator

MAX_ID = 2 ** 64 - 1

_id_generator: IdGenerator = RandomIdGenerator()


class Clock:
    """Wall clock used to timestamp spans. Replaced by a fake in tests."""

    def time_ns(self) -> int:
        return time.time_ns()


def generate_id(id_generator: Optional[IdGenerator] = None) -> int:
    """
    Generate a random, non-zero 64-bit id.

    Both trace ids and span ids are 64 bits wide, so the OpenTelemetry
    span id generator is used for either.
    """
    return (id_generator or _id_generator).generate_span_id()


def format_id(value: int) -> str:
    """Format a 64-bit id as the decimal string used on the wire."""
    return str(value)


def parse_id(value: Optional[str]) -> Optional[int]:
    """
    Parse a decimal 64-bit unsigned id.

    Returns:
        The id, or None if the value is empty, not decimal, zero or out of range
    """
    if value is None:
        return None
    text = str(value).strip()
    if not (text.isascii() and text.isdigit()):
        return None
    parsed = int(text)
    if parsed == 0 or parsed > MAX_ID:
        return None
    return parsed


_TRUE_VALUES = ("1", "true", "t", "yes", "y", "on")
_FALSE_VALUES = ("0", "false", "f", "no", "n", "off")


def parse_bool(value) -> Optional[bool]:
    """
    Parse a user supplied boolean.

    Returns None when the value is not recognisable as a boolean.
    """
    if isinstance(value, bool):
        return value
    if value is None:
        return None
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None


def to_otel_trace_id(trace_id: int) -> int:
    """Widen a 64-bit trace id to OpenTelemetry's 128-bit space (upper bits zero)."""
    return trace_id & MAX_ID
