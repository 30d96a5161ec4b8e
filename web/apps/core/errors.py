"""Classified failures for the service framework.

Business logic reports expected failures by *returning* a ``Failure``; the
orchestrator inspects its ``status`` to build the envelope. Code running deep
inside a strategy can raise ``AppError`` instead, which carries the same
``Failure`` and is classified identically.
"""

from dataclasses import dataclass

from .envelope import ServiceStatus


@dataclass(frozen=True)
class Failure:
    """A classified, caller-visible failure.

    Attributes:
        status: Envelope status the failure maps to. Never ``SUCCESS``.
        message: Short diagnostic text shown to the caller.
    """

    status: ServiceStatus
    message: str

    def __post_init__(self):
        if self.status is ServiceStatus.SUCCESS:
            raise ValueError("A failure cannot be classified as SUCCESS")

    @classmethod
    def validation(cls, message: str) -> "Failure":
        return cls(ServiceStatus.VALIDATION_ERROR, message)

    @classmethod
    def not_found(cls, message: str) -> "Failure":
        return cls(ServiceStatus.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> "Failure":
        return cls(ServiceStatus.CONFLICT, message)


class AppError(Exception):
    """Exception form of a ``Failure`` for use inside strategies."""

    def __init__(self, status: ServiceStatus, message: str):
        super().__init__(message)
        self.failure = Failure(status, message)

    @property
    def status(self) -> ServiceStatus:
        return self.failure.status


class HelperNotFoundError(LookupError):
    """No helper is registered under the requested key.

    This is a wiring error, not a user-facing outcome: it is never turned
    into an envelope.
    """

    def __init__(self, key: str):
        super().__init__(f"Helper not found: {key}")
        self.key = key
