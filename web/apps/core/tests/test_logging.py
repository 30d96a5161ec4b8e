"""Tests for the service logger, diagnostic context and log filters."""

import asyncio
import logging

import pytest

from apps.core.logging import ServiceLogger, current_context, diagnostic_context
from gateway.logging_filters import DiagnosticContextFilter, RequestIdFilter
from gateway.middleware import REQUEST_ID_CTX


def test_context_is_attached_to_record(caplog):
    log = ServiceLogger("tests.logging")
    with caplog.at_level(logging.INFO, logger="tests.logging"):
        log.info("Created order", {"orderId": "o-1"})
    record = caplog.records[-1]
    assert record.getMessage() == "Created order"
    assert record.context == {"orderId": "o-1"}


def test_critical_logs_at_critical_with_exception(caplog):
    log = ServiceLogger("tests.logging")
    err = RuntimeError("broker down")
    with caplog.at_level(logging.INFO, logger="tests.logging"):
        log.critical("publish failed", err, {"orderId": "o-1"})
    record = caplog.records[-1]
    assert record.levelno == logging.CRITICAL
    assert record.exc_info[1] is err


@pytest.mark.parametrize(
    "elapsed, success, level",
    [(10, True, logging.INFO), (6000, True, logging.WARNING), (10, False, logging.ERROR)],
)
def test_log_performance_levels(caplog, elapsed, success, level):
    log = ServiceLogger("tests.logging")
    with caplog.at_level(logging.INFO, logger="tests.logging"):
        log.log_performance("Orders.CreateOrder", elapsed, success)
    record = caplog.records[-1]
    assert record.levelno == level
    assert record.context["operation"] == "Orders.CreateOrder"
    assert record.context["success"] is success


def test_log_performance_rejects_negative_time():
    with pytest.raises(ValueError):
        ServiceLogger("tests.logging").log_performance("op", -1, True)


def test_log_audit(caplog):
    log = ServiceLogger("tests.logging")
    with caplog.at_level(logging.INFO, logger="tests.logging"):
        log.log_audit("create", "1", "order/o-1", {"ip": "10.0.0.1"})
    record = caplog.records[-1]
    assert record.getMessage() == "AUDIT: User '1' performed 'create' on 'order/o-1'"
    assert record.context["ip"] == "10.0.0.1"


def test_diagnostic_context_nests_and_restores_on_error():
    with diagnostic_context(correlationId="r-1"):
        with pytest.raises(RuntimeError):
            with diagnostic_context(operation="Orders.CreateOrder", userId=None):
                assert current_context() == {"correlationId": "r-1", "operation": "Orders.CreateOrder"}
                raise RuntimeError("boom")
        assert current_context() == {"correlationId": "r-1"}
    assert current_context() == {}


def test_diagnostic_context_does_not_leak_between_tasks():
    async def handle(rid):
        with diagnostic_context(correlationId=rid):
            await asyncio.sleep(0)
            return current_context()["correlationId"]

    async def main():
        return await asyncio.gather(*(handle(f"r-{i}") for i in range(5)))

    assert asyncio.run(main()) == [f"r-{i}" for i in range(5)]
    assert current_context() == {}


def test_filters_enrich_records():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    record.context = {"orderId": "o-1"}
    token = REQUEST_ID_CTX.set("req-9")
    try:
        with diagnostic_context(operation="Orders.CreateOrder", orderId="bound"):
            assert DiagnosticContextFilter().filter(record)
            assert RequestIdFilter().filter(record)
    finally:
        REQUEST_ID_CTX.reset(token)
    assert record.request_id == "req-9"
    assert record.context == {"operation": "Orders.CreateOrder", "orderId": "o-1"}


def test_request_id_filter_outside_request():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
    RequestIdFilter().filter(record)
    assert record.request_id == "-"
