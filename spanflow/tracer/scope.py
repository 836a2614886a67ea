"""Scopes bind a span to the currently executing logical flow."""

from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from spanflow.context.context import get_active_scope, set_active_scope

if TYPE_CHECKING:
    from spanflow.tracer.span import Span

logger = logging.getLogger(__name__)


class Scope:
    """
    Activation of a span in the current logical flow.

    Closing a scope restores the scope that was active when it was opened
    and, unless created with finish_on_close=False, finishes its span.
    """

    def __init__(
        self,
        manager: "ScopeManager",
        span: "Span",
        parent: Optional["Scope"],
        finish_on_close: bool = True,
    ) -> None:
        self.manager = manager
        self.span = span
        self.parent = parent
        self.finish_on_close = finish_on_close
        self.closed = False

    def close(self) -> None:
        self.manager.close(self)

    def dispose(self) -> None:
        """Alias of close()."""
        self.close()

    def __enter__(self) -> "Scope":
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc is not None:
                self.span.set_exception(exc)
        finally:
            self.close()
        return False

    async def __aenter__(self) -> "Scope":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return self.__exit__(exc_type, exc, tb)

    def __repr__(self) -> str:
        return f"Scope(span={self.span!r}, closed={self.closed})"


class ScopeManager:
    """Keeps the stack of active scopes for each logical flow."""

    @property
    def active(self) -> Optional[Scope]:
        return get_active_scope()

    def activate(self, span: "Span", finish_on_close: bool = True) -> Scope:
        """Make span active, remembering the scope it replaces."""
        scope = Scope(self, span, get_active_scope(), finish_on_close)
        set_active_scope(scope)
        return scope

    def close(self, scope: Scope) -> None:
        """
        Deactivate scope and finish its span if requested.

        A scope that is not the active one is being closed out of order: the
        ambient scope is left as it is. Closed ancestors are skipped when
        restoring, so an out of order close never resurrects a dead scope.
        """
        if scope.closed:
            return
        scope.closed = True

        if get_active_scope() is scope:
            parent = scope.parent
            while parent is not None and parent.closed:
                parent = parent.parent
            set_active_scope(parent)
        else:
            logger.debug(
                "Scope for span %r closed out of order, leaving the active scope unchanged",
                scope.span.operation_name,
            )

        if scope.finish_on_close:
            scope.span.finish()
