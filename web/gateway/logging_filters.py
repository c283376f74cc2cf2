"""Logging filter that stamps records with the current request id.

``LOGGING`` in ``gateway.settings`` installs this filter on the console
handler, so the JSON formatter can always reference ``%(request_id)s``.
Records emitted outside a request (management commands, notification
worker threads) carry ``"-"``.
"""

from logging import Filter, LogRecord

from .middleware import REQUEST_ID_CTX


class RequestIdFilter(Filter):
    """Copy ``REQUEST_ID_CTX`` into ``record.request_id``."""

    def filter(self, record: LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = REQUEST_ID_CTX.get()
        return True
