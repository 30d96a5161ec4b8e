"""Logging filters for enriching log records with request context.

``RequestIdFilter`` injects the current request id set by the gateway
middleware; ``DiagnosticContextFilter`` merges the diagnostic context bound
with ``apps.core.logging.diagnostic_context`` into ``record.context``.
Adding both filters to a handler enables per-request correlation in logs
without modifying individual log statements.
"""

from logging import Filter, LogRecord

from apps.core.logging import current_context
from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    """Attach a ``request_id`` attribute to log records.

    The value is retrieved from the ``REQUEST_ID_CTX`` ContextVar set by
    ``RequestIdMiddleware``; outside a request it is a hyphen ("-") so
    formatters can reliably reference ``%(request_id)s``.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        return True


class DiagnosticContextFilter(Filter):
    """Merge the bound diagnostic context into ``record.context``.

    Values passed explicitly with the log call win over bound values.
    """

    def filter(self, record: LogRecord) -> bool:
        bound = current_context()
        explicit = getattr(record, "context", None) or {}
        if bound or explicit:
            record.context = {**bound, **explicit}
        return True
