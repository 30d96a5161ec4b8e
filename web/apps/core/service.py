"""Service orchestrator: authorize, resolve a helper, execute, classify.

A ``Service`` is built once at startup with its collaborators and is then
stateless: ``run`` can be called concurrently from many requests. Every
outcome of ``run`` is a ``ServiceOutput``; the one exception is a missing
helper, which is a wiring error and propagates.
"""

import time
from typing import Callable, Generic, Optional, TypeVar

from .envelope import ServiceInput, ServiceOutput, User
from .errors import AppError, Failure
from .logging import ServiceLogger, diagnostic_context
from .ports import AuthorizationPort, LoggerPort, Usecase
from .registry import HelperRegistry


I = TypeVar("I")
O = TypeVar("O")
H = TypeVar("H")

UNAUTHORIZED_MESSAGE = "User is not authorized to perform this action"
MAX_MESSAGE_LENGTH = 200
NO_OUTPUT_MESSAGE = "Operation produced no result"


def short_message(exc: BaseException) -> str:
    """Reduce an exception to a one-line caller-safe message."""
    text = str(exc).strip().splitlines()[0] if str(exc).strip() else type(exc).__name__
    if len(text) > MAX_MESSAGE_LENGTH:
        text = text[: MAX_MESSAGE_LENGTH - 3] + "..."
    return text


class Service(Generic[I, O, H]):
    """Runs one named operation on behalf of a caller.

    Args:
        name: Canonical operation name checked by the authorization port,
            e.g. ``"Orders.CreateOrder"``.
        helper_key: Registry key of the active helper.
        registry: Helpers available to this operation.
        authorization: Port deciding whether a caller may run ``name``.
        usecase_factory: Builds the business logic unit around a helper.
        logger: Optional log sink, defaults to a ``core.service`` logger.

    Raises:
        HelperNotFoundError: If ``helper_key`` is not registered. A service
            that cannot resolve its helper must fail at startup.
    """

    def __init__(
        self,
        name: str,
        helper_key: str,
        registry: HelperRegistry[H],
        authorization: AuthorizationPort,
        usecase_factory: Callable[[H], Usecase[I, O]],
        logger: Optional[LoggerPort] = None,
    ):
        self.name = name
        self.helper_key = helper_key
        self.registry = registry
        self.authorization = authorization
        self.usecase_factory = usecase_factory
        self.logger: LoggerPort = logger or ServiceLogger("core.service")
        registry.require(helper_key)

    def select_helper_key(self, data: I) -> str:
        """Key of the helper used for ``data``. Subclasses may route on input."""
        return self.helper_key

    def handle(self, service_input: ServiceInput[I]) -> ServiceOutput[O]:
        """Run the operation for a transport-built ``ServiceInput``."""
        return self.run(service_input.user, service_input.data)

    def run(self, user: Optional[User], data: I) -> ServiceOutput[O]:
        """Execute the operation for ``user``.

        Args:
            user: Caller identity, None when the caller is anonymous.
            data: Operation input.

        Returns:
            ServiceOutput: ``SUCCESS`` with the usecase output,
            ``UNAUTHORIZED`` when the identity is missing or denied, the
            failure's own status for classified failures, and ``FAILURE``
            for anything unexpected.

        Raises:
            HelperNotFoundError: If the helper key cannot be resolved.
        """
        if user is None:
            self.logger.warn("Rejected anonymous call", {"operation": self.name})
            return ServiceOutput.unauthorized(UNAUTHORIZED_MESSAGE)

        with diagnostic_context(operation=self.name, userId=user.id):
            started = time.perf_counter()
            output = self._run(user, data)
            elapsed_ms = (time.perf_counter() - started) * 1000
            self.logger.log_performance(
                self.name, elapsed_ms, output.ok, {"status": output.status.value}
            )
            return output

    def _run(self, user: User, data: I) -> ServiceOutput[O]:
        try:
            allowed = self.authorization.is_authorized(user, self.name)
        except Exception as exc:
            self.logger.error("Authorization check failed", exc)
            return ServiceOutput.failure(short_message(exc))
        if not allowed:
            self.logger.warn("Caller not authorized", {"role": user.role})
            return ServiceOutput.unauthorized(UNAUTHORIZED_MESSAGE)

        helper = self.registry.require(self.select_helper_key(data))
        try:
            usecase = self.usecase_factory(helper)
            result = usecase.execute(data)
        except AppError as exc:
            result = exc.failure
        except Exception as exc:
            self.logger.error("Unexpected failure while executing usecase", exc)
            return ServiceOutput.failure(short_message(exc))

        if isinstance(result, Failure):
            self.logger.info(
                "Usecase rejected input",
                {"status": result.status.value, "reason": result.message},
            )
            return ServiceOutput.error(result.status, result.message)
        if result is None:
            self.logger.error("Usecase returned no output")
            return ServiceOutput.failure(NO_OUTPUT_MESSAGE)
        return ServiceOutput.success(result)
