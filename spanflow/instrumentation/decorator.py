"""@traced decorator for instrumenting functions."""

from __future__ import annotations

import functools
import inspect
from typing import Any, Callable, Dict, Optional


def traced(
    name: Optional[str] = None,
    *,
    service: Optional[str] = None,
    resource: Optional[str] = None,
    span_type: Optional[str] = None,
    tags: Optional[Dict[str, Any]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorate a function to run it inside an active span.

    - Supports sync and async functions.
    - The span is a child of whatever scope is active when the function is called.
    - Exceptions are recorded on the span and re-raised.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        operation_name = name or f"{func.__module__}.{func.__qualname__}"

        def _start():
            scope = _get_tracer().start_active(operation_name, service_name=service, tags=tags)
            scope.span.resource_name = resource or func.__name__
            if span_type:
                scope.span.span_type = span_type
            return scope

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with _start():
                return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args, **kwargs):
            async with _start():
                return await func(*args, **kwargs)

        return async_wrapper if inspect.iscoroutinefunction(func) else sync_wrapper

    return decorator


def _get_tracer():
    import spanflow

    return spanflow.get_tracer()
