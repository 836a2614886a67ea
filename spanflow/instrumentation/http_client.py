"""HTTP client helpers for context propagation."""

from __future__ import annotations

from typing import Dict

from spanflow.context import get_current_span, inject


def inject_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """
    Inject the active span's context into the provided headers dict, if a span is active.

    Returns the same headers mapping for convenience.
    """
    span = get_current_span()
    if span is not None:
        inject(span.context, headers)
    return headers
