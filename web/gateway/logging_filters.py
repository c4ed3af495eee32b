"""Logging filters for enriching log records with request context.

This module provides a logging filter that injects the current request id
and caller id into log records using the ContextVars set by the gateway
middleware. Adding the filter to your logging configuration enables
per-request correlation in logs without modifying individual log
statements.
"""

from logging import Filter, LogRecord

from .middleware import REQUEST_ID_CTX, USER_ID_CTX


class RequestContextFilter(Filter):
    """Attach ``request_id`` and ``user_id`` attributes to log records.

    Outside a request both values are a hyphen ("-") so formatters can
    reliably reference ``%(request_id)s`` and ``%(user_id)s``.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = REQUEST_ID_CTX.get()
        record.user_id = USER_ID_CTX.get()
        return True
