"""Result envelope and caller identity shared by every orchestrated service.

A service never returns raw values or raises to its caller: it answers with
a ``ServiceOutput`` whose ``status`` tells the transport layer how to map the
outcome, and which carries either a payload (on success) or a short error
message (on any other status).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar


I = TypeVar("I")
O = TypeVar("O")


class ServiceStatus(str, Enum):
    """Closed set of outcomes a service can report."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


@dataclass(frozen=True)
class User:
    """Identity of the caller.

    Attributes:
        id: Caller identifier. An identity without id is treated as
            unauthenticated by the default authorization contract.
        email: Contact email, informative only.
        role: Role name used by role-based authorization.
    """

    id: Optional[str]
    email: Optional[str] = None
    role: Optional[str] = None


@dataclass(frozen=True)
class ServiceInput(Generic[I]):
    """Identity plus operation input, as handed over by the transport."""

    user: Optional[User]
    data: I


@dataclass(frozen=True)
class ServiceOutput(Generic[O]):
    """Uniform outcome of a service run.

    Exactly one of ``data`` / ``error_message`` is populated: ``data`` for
    ``SUCCESS``, ``error_message`` for every other status.
    """

    status: ServiceStatus
    data: Optional[O] = None
    error_message: Optional[str] = None

    def __post_init__(self):
        if self.status is ServiceStatus.SUCCESS:
            if self.error_message is not None or self.data is None:
                raise ValueError("A successful output needs data and no error message")
        elif self.error_message is None or self.data is not None:
            raise ValueError(f"A {self.status.value} output needs a message and no data")

    @property
    def ok(self) -> bool:
        return self.status is ServiceStatus.SUCCESS

    @classmethod
    def success(cls, data: O) -> "ServiceOutput[O]":
        return cls(ServiceStatus.SUCCESS, data=data)

    @classmethod
    def error(cls, status: ServiceStatus, message: str) -> "ServiceOutput[O]":
        return cls(status, error_message=message)

    @classmethod
    def failure(cls, message: str) -> "ServiceOutput[O]":
        return cls.error(ServiceStatus.FAILURE, message)

    @classmethod
    def unauthorized(cls, message: str) -> "ServiceOutput[O]":
        return cls.error(ServiceStatus.UNAUTHORIZED, message)

    @classmethod
    def not_found(cls, message: str) -> "ServiceOutput[O]":
        return cls.error(ServiceStatus.NOT_FOUND, message)

    @classmethod
    def validation_error(cls, message: str) -> "ServiceOutput[O]":
        return cls.error(ServiceStatus.VALIDATION_ERROR, message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceOutput[O]":
        return cls.error(ServiceStatus.CONFLICT, message)

    @classmethod
    def internal_error(cls, message: str) -> "ServiceOutput[O]":
        return cls.error(ServiceStatus.INTERNAL_ERROR, message)

    def to_dict(self, data: Any = None) -> dict:
        """Wire representation ``{status, data, errorMessage}``.

        Args:
            data: Already-serialized payload to use instead of ``self.data``
                (the transport serializes typed outputs itself).
        """
        return {
            "status": self.status.value,
            "data": data if data is not None else self.data,
            "errorMessage": self.error_message,
        }
