"""Unit tests for the Service orchestrator.

Stub usecases and authorization ports are used to drive every branch of
``Service.run``: anonymous callers, denied callers, classified failures
(returned or raised), unexpected errors and missing helpers.
"""

import pytest

from apps.core.envelope import ServiceInput, ServiceStatus, User
from apps.core.errors import AppError, Failure, HelperNotFoundError
from apps.core.logging import current_context
from apps.core.ports import LoggerPort
from apps.core.registry import HelperRegistry
from apps.core.service import NO_OUTPUT_MESSAGE, UNAUTHORIZED_MESSAGE, Service, short_message


USER = User(id="1", email="api-user@example.com", role="USER")


class AllowAll:
    """Authorization stub that records the operations it was asked about."""
    def __init__(self):
        self.calls = []
    def is_authorized(self, user, operation):
        self.calls.append((user, operation))
        return True


class DenyAll:
    def is_authorized(self, user, operation): return False


class RecordingUsecase:
    """Usecase stub returning (or raising) a fixed result."""
    def __init__(self, helper, result=None, exc=None):
        self.helper = helper
        self.result = result
        self.exc = exc
    def execute(self, data):
        self.helper.append(data)
        if self.exc is not None:
            raise self.exc
        return self.result


def make_service(result=None, exc=None, authorization=None, helpers=None):
    calls = []
    registry = HelperRegistry({"HelperV0": calls}).freeze() if helpers is None else helpers
    service = Service(
        name="Tests.Operation",
        helper_key="HelperV0",
        registry=registry,
        authorization=authorization or AllowAll(),
        usecase_factory=lambda helper: RecordingUsecase(helper, result=result, exc=exc),
    )
    return service, calls


def test_success_wraps_output():
    service, calls = make_service(result={"id": "42"})
    out = service.run(USER, {"x": 1})
    assert out.status is ServiceStatus.SUCCESS
    assert out.data == {"id": "42"}
    assert out.error_message is None
    assert calls == [{"x": 1}]


def test_missing_identity_is_unauthorized_without_authorization_call():
    authz = AllowAll()
    service, calls = make_service(result="ok", authorization=authz)
    out = service.run(None, {"x": 1})
    assert out.status is ServiceStatus.UNAUTHORIZED
    assert out.error_message == UNAUTHORIZED_MESSAGE
    assert authz.calls == []
    assert calls == []


def test_authorization_receives_operation_name():
    authz = AllowAll()
    service, _ = make_service(result="ok", authorization=authz)
    service.run(USER, {})
    assert authz.calls == [(USER, "Tests.Operation")]


def test_denied_caller_never_reaches_usecase():
    service, calls = make_service(result="ok", authorization=DenyAll())
    out = service.run(USER, {"x": 1})
    assert out.status is ServiceStatus.UNAUTHORIZED
    assert out.data is None
    assert out.error_message
    assert calls == []


@pytest.mark.parametrize(
    "failure",
    [
        Failure.validation("Customer ID is required"),
        Failure.not_found("Order not found"),
        Failure.conflict("Order already exists"),
    ],
)
def test_returned_failure_maps_to_its_status(failure):
    service, _ = make_service(result=failure)
    out = service.run(USER, {})
    assert out.status is failure.status
    assert out.error_message == failure.message
    assert out.data is None


def test_raised_app_error_maps_to_its_status():
    service, _ = make_service(exc=AppError(ServiceStatus.CONFLICT, "duplicate"))
    out = service.run(USER, {})
    assert out.status is ServiceStatus.CONFLICT
    assert out.error_message == "duplicate"


def test_unexpected_error_becomes_failure_with_short_message():
    service, _ = make_service(exc=RuntimeError("database is locked\nTraceback ..."))
    out = service.run(USER, {})
    assert out.status is ServiceStatus.FAILURE
    assert out.error_message == "database is locked"


def test_authorization_error_becomes_failure():
    class Broken:
        def is_authorized(self, user, operation): raise ConnectionError("auth backend down")
    service, calls = make_service(result="ok", authorization=Broken())
    out = service.run(USER, {})
    assert out.status is ServiceStatus.FAILURE
    assert out.error_message == "auth backend down"
    assert calls == []


def test_unknown_helper_key_fails_at_construction():
    with pytest.raises(HelperNotFoundError):
        make_service(result="ok", helpers=HelperRegistry())


def test_unknown_helper_key_at_run_time_propagates():
    class Routed(Service):
        def select_helper_key(self, data):
            return data["key"]

    service = Routed(
        name="Tests.Operation",
        helper_key="HelperV0",
        registry=HelperRegistry({"HelperV0": []}),
        authorization=AllowAll(),
        usecase_factory=lambda helper: RecordingUsecase(helper, result="ok"),
    )
    assert service.run(USER, {"key": "HelperV0"}).ok
    with pytest.raises(HelperNotFoundError):
        service.run(USER, {"key": "HelperV1"})


def test_diagnostic_context_is_bound_during_run_and_cleared_after():
    seen = {}

    class Spy:
        def __init__(self, helper): pass
        def execute(self, data):
            seen.update(current_context())
            raise RuntimeError("boom")

    service = Service(
        name="Tests.Operation",
        helper_key="HelperV0",
        registry=HelperRegistry({"HelperV0": object()}),
        authorization=AllowAll(),
        usecase_factory=Spy,
    )
    out = service.run(USER, {})
    assert out.status is ServiceStatus.FAILURE
    assert seen == {"operation": "Tests.Operation", "userId": "1"}
    assert current_context() == {}


def test_short_message_truncates_and_falls_back_to_class_name():
    assert short_message(ValueError("")) == "ValueError"
    long = short_message(ValueError("x" * 500))
    assert len(long) == 200 and long.endswith("...")


def test_usecase_without_output_becomes_failure():
    service, calls = make_service(result=None)
    out = service.run(USER, {"x": 1})
    assert out.status is ServiceStatus.FAILURE
    assert out.error_message == NO_OUTPUT_MESSAGE
    assert calls == [{"x": 1}]


def test_handle_unpacks_service_input():
    service, calls = make_service(result={"id": "42"})
    out = service.handle(ServiceInput(user=USER, data={"x": 1}))
    assert out.data == {"id": "42"}
    assert calls == [{"x": 1}]
    assert service.handle(ServiceInput(user=None, data={"x": 2})).status is ServiceStatus.UNAUTHORIZED
    assert calls == [{"x": 1}]


def test_injected_logger_receives_performance_records():
    class RecordingLogger(LoggerPort):
        def __init__(self):
            self.records = []
        def info(self, message, context=None): self.records.append(("info", message))
        def warn(self, message, context=None): self.records.append(("warn", message))
        def error(self, message, exc=None, context=None): self.records.append(("error", message))
        def critical(self, message, exc=None, context=None): self.records.append(("critical", message))
        def log_performance(self, operation, elapsed_ms, success, context=None):
            self.records.append(("performance", operation, success, context["status"]))

    logger = RecordingLogger()
    service = Service(
        name="Tests.Operation",
        helper_key="HelperV0",
        registry=HelperRegistry({"HelperV0": []}),
        authorization=DenyAll(),
        usecase_factory=lambda helper: RecordingUsecase(helper, result="ok"),
        logger=logger,
    )
    service.run(USER, {})
    assert logger.records == [
        ("warn", "Caller not authorized"),
        ("performance", "Tests.Operation", False, "UNAUTHORIZED"),
    ]
