"""HTTP server helpers for extracting context and creating server spans."""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import urlsplit

from spanflow import runtime_config
from spanflow.context import extract
from spanflow.tracer import tags
from spanflow.tracer.scope import Scope
from spanflow.tracer.span_context import SpanContext
from spanflow.tracer.tags import SpanTypes
from spanflow.tracer.tracer import Tracer

logger = logging.getLogger(__name__)

SERVER_OPERATION_NAME = "web.request"


def extract_parent_context(headers: Any) -> Optional[SpanContext]:
    """Parse propagation headers and return the upstream SpanContext if valid."""
    try:
        return extract(headers)
    except Exception:
        logger.exception("Error extracting propagated HTTP headers")
        return None


def start_server_span(
    tracer: Tracer,
    method: Optional[str],
    url: str,
    headers: Any = None,
    resource: Optional[str] = None,
    operation_name: str = SERVER_OPERATION_NAME,
) -> Scope:
    """
    Start the active span of an incoming HTTP request.

    Propagation headers are only honoured when no scope is active yet;
    otherwise the request span nests under the active one.

    Returns:
        The active scope; pass it to finish_server_span() when the response is sent
    """
    http_method = (method or "UNKNOWN").upper()

    parent = None
    if tracer.active_scope is None and headers:
        parent = extract_parent_context(headers)

    scope = tracer.start_active(operation_name, child_of=parent)
    span = scope.span
    span.span_type = SpanTypes.WEB
    span.resource_name = resource or f"{http_method} {urlsplit(url).path or '/'}"
    span.set_tag(tags.HTTP_METHOD, http_method)
    span.set_tag(tags.HTTP_URL, url.lower())
    if runtime_config.get_analytics_enabled():
        span.set_tag(tags.ANALYTICS, True)
    return scope


def finish_server_span(
    scope: Scope,
    status_code: Optional[int] = None,
    error: Optional[BaseException] = None,
) -> None:
    """Record the response on the request span and close its scope."""
    try:
        if status_code is not None:
            scope.span.set_tag(tags.HTTP_STATUS_CODE, status_code)
        if error is not None:
            scope.span.set_exception(error)
    finally:
        scope.close()
