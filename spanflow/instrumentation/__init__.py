"""Instrumentation helpers."""

from spanflow.instrumentation.decorator import traced
from spanflow.instrumentation.http_client import inject_headers
from spanflow.instrumentation.http_server import (
    extract_parent_context,
    finish_server_span,
    start_server_span,
)

__all__ = [
    "traced",
    "inject_headers",
    "extract_parent_context",
    "start_server_span",
    "finish_server_span",
]
