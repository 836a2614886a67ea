"""Well-known tag names, span types and tag directives."""

from __future__ import annotations

from enum import Enum
from typing import Optional

# Error details recorded by Span.set_exception
ERROR_MSG = "error.msg"
ERROR_TYPE = "error.type"
ERROR_STACK = "error.stack"

# HTTP
HTTP_METHOD = "http.method"
HTTP_URL = "http.url"
HTTP_STATUS_CODE = "http.status_code"

# Directives
SAMPLING_PRIORITY = "sampling.priority"
MANUAL_KEEP = "manual.keep"
ANALYTICS = "_dd1.sr.eausr"


class SpanTypes:
    """Kinds of request a span can represent. Not to be confused with span kind."""

    WEB = "web"
    HTTP = "http"
    SQL = "sql"
    CACHE = "cache"
    CUSTOM = "custom"


class TagDirective(Enum):
    """
    Tag keys that act on the trace instead of being stored as plain tags.

    Span.set_tag checks this set before falling through to the tag bag.
    """

    SAMPLING_PRIORITY = SAMPLING_PRIORITY
    MANUAL_KEEP = MANUAL_KEEP
    ANALYTICS = ANALYTICS

    @classmethod
    def for_key(cls, key: str) -> Optional["TagDirective"]:
        try:
            return cls(key)
        except ValueError:
            return None
