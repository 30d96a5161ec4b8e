"""Structured diagnostic logging for services.

``ServiceLogger`` is a thin facade over a standard library logger: every
call accepts a context mapping that ends up on the record as
``record.context``, which the JSON formatter renders as a nested object.

Diagnostic context (operation name, caller id, ...) is bound per logical
request with ``diagnostic_context()``. It lives in a ContextVar, so it is
isolated per thread and per asyncio task, and it is restored when the
``with`` block exits, whether normally or through an exception. The
``gateway.logging_filters.DiagnosticContextFilter`` merges it into records
emitted by any logger.
"""

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

from .ports import LoggerPort


_EMPTY: Mapping[str, Any] = MappingProxyType({})
DIAGNOSTIC_CTX: ContextVar[Mapping[str, Any]] = ContextVar("diagnostic_context", default=_EMPTY)

SLOW_OPERATION_MS = 5000


def current_context() -> dict[str, Any]:
    """Return a copy of the diagnostic context bound to the current task."""
    return dict(DIAGNOSTIC_CTX.get())


@contextmanager
def diagnostic_context(**values: Any) -> Iterator[Mapping[str, Any]]:
    """Bind ``values`` on top of the current diagnostic context.

    Values set to None are dropped. The previous context is restored on
    exit.

    Yields:
        The context in effect inside the block (read-only).
    """
    merged = {**DIAGNOSTIC_CTX.get(), **{k: v for k, v in values.items() if v is not None}}
    bound = MappingProxyType(merged)
    token = DIAGNOSTIC_CTX.set(bound)
    try:
        yield bound
    finally:
        DIAGNOSTIC_CTX.reset(token)


class ServiceLogger(LoggerPort):
    """``LoggerPort`` over a stdlib logger, with a ``(message, context)`` signature.

    Args:
        name: Name of the underlying ``logging`` logger.
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def _log(
        self,
        level: int,
        message: str,
        context: Optional[Mapping[str, Any]] = None,
        exc: Optional[BaseException] = None,
    ) -> None:
        if message is None:
            raise ValueError("Message cannot be None")
        extra = {"context": dict(context)} if context else None
        self.logger.log(level, message, extra=extra, exc_info=exc)

    def debug(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self._log(logging.INFO, message, context)

    def warn(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, context)

    def error(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._log(logging.ERROR, message, context, exc)

    def critical(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._log(logging.CRITICAL, message, context, exc)

    def log_performance(
        self,
        operation: str,
        elapsed_ms: float,
        success: bool,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log how long an operation took.

        Failures are logged at ERROR, successful calls slower than
        ``SLOW_OPERATION_MS`` at WARNING, the rest at INFO.

        Raises:
            ValueError: If ``elapsed_ms`` is negative.
        """
        if elapsed_ms < 0:
            raise ValueError("Execution time cannot be negative")
        if not success:
            level = logging.ERROR
        elif elapsed_ms > SLOW_OPERATION_MS:
            level = logging.WARNING
        else:
            level = logging.INFO
        data = {
            "operation": operation,
            "executionTimeMs": round(elapsed_ms, 3),
            "success": success,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **(context or {}),
        }
        outcome = "SUCCESS" if success else "FAILED"
        self._log(level, f"Performance: {operation} - {elapsed_ms:.0f}ms - {outcome}", data)

    def log_audit(
        self,
        action: str,
        user_id: str,
        resource: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Log that ``user_id`` performed ``action`` on ``resource``."""
        data = {
            "action": action,
            "userId": user_id,
            "resource": resource,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **(details or {}),
        }
        self._log(logging.INFO, f"AUDIT: User '{user_id}' performed '{action}' on '{resource}'", data)
