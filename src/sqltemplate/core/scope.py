"""Scoped acquisition with guaranteed, best-effort release.

``ReleaseScope`` wraps ``contextlib.ExitStack``. A resource is registered
the moment it has been acquired; on exit, however the block is left, the
registered releases run last-in first-out. Each release is guarded on its
own: a failure is recorded as a ``ReleaseError``, logged at warning level,
and the remaining releases still run. Release failures never propagate, so
they can neither mask the block's own exception nor fail an otherwise
successful call.

Usage::

    with ReleaseScope(sql=sql) as scope:
        conn = scope.register("connection", factory.acquire())
        stmt = scope.register("statement", conn.prepare(sql))
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import ExitStack
from typing import Any, TypeVar

from sqltemplate.core.errors import ErrorContext, ReleaseError
from sqltemplate.core.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")


class ReleaseScope:
    """Release registered resources in reverse order on every exit path."""

    def __init__(self, *, sql: str | None = None):
        self._stack = ExitStack()
        self._sql = sql
        self.failures: list[ReleaseError] = []

    def __enter__(self) -> ReleaseScope:
        self._stack.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        return self._stack.__exit__(exc_type, exc_val, exc_tb)

    def register(
        self,
        name: str,
        resource: R,
        release: Callable[[], Any] | None = None,
    ) -> R:
        """Register ``resource`` for release and return it.

        ``release`` defaults to ``resource.release``.
        """
        self._stack.callback(self._release, name, release or resource.release)
        return resource

    def _release(self, name: str, release: Callable[[], Any]) -> None:
        try:
            release()
        except Exception as e:
            error = ReleaseError(
                f"Failed to release {name}: {e}",
                cause=e,
                context=ErrorContext(sql=self._sql, phase="release", resource=name),
            )
            self.failures.append(error)
            logger.warning("resource_release_failed", **error.to_dict())


__all__ = [
    "ReleaseScope",
]
