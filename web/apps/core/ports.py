"""Ports (DIP) consumed by the service framework.

The orchestrator only knows these capability sets; concrete implementations
are injected through constructors.
"""

from typing import Any, Mapping, Optional, Protocol, TypeVar, Union

from .envelope import User
from .errors import Failure


I = TypeVar("I", contravariant=True)
O = TypeVar("O", covariant=True)


class Usecase(Protocol[I, O]):
    """Business logic producing an output for an input, or a ``Failure``."""

    def execute(self, data: I) -> Union[O, Failure]:
        """Run the operation.

        Args:
            data: Operation input.

        Returns:
            The typed output, or a ``Failure`` describing why the input
            was rejected.
        """
        raise NotImplementedError()


class AuthorizationPort(Protocol):
    """Decides whether an identity may run a named operation."""

    def is_authorized(self, user: User, operation: str) -> bool:
        """Return True if ``user`` may run ``operation`` (e.g. ``Orders.CreateOrder``)."""
        raise NotImplementedError()


class LoggerPort(Protocol):
    """Diagnostic sink accepting a message and a loosely-typed context."""

    def info(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        raise NotImplementedError()

    def warn(self, message: str, context: Optional[Mapping[str, Any]] = None) -> None:
        raise NotImplementedError()

    def error(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        raise NotImplementedError()

    def critical(
        self,
        message: str,
        exc: Optional[BaseException] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        raise NotImplementedError()

    def log_performance(
        self,
        operation: str,
        elapsed_ms: float,
        success: bool,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Record how long ``operation`` took and whether it succeeded."""
        raise NotImplementedError()
