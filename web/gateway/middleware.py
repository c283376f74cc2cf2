"""Gateway middleware: request correlation, access logging and body limits.

``RequestIdMiddleware`` gives every request an identifier. The value of an
incoming ``X-Request-Id`` header is reused when present, otherwise a UUIDv4
is generated. The id is stored on the request, in the ``REQUEST_ID_CTX``
context variable (read by ``gateway.logging_filters.RequestIdFilter`` and by
the outgoing HTTP adapters) and echoed back in the ``X-Request-ID`` response
header. One structured ``request handled`` line is logged per request.

``ApiSizeLimitMiddleware`` rejects API requests whose declared body is
larger than ``API_MAX_BYTES``.
"""

import contextvars
import logging
import os
import time
import uuid

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

REQUEST_ID_CTX = contextvars.ContextVar("request_id", default="-")
MAX_API_BYTES = int(os.getenv("API_MAX_BYTES", str(1 * 1024 * 1024)))

logger = logging.getLogger("gateway.access")


class RequestIdMiddleware(MiddlewareMixin):
    """Assign, propagate and log a per-request identifier.

    Attributes:
        HEADER (str): Incoming header name in ``request.META`` casing.
        RESPONSE_HEADER (str): Header set on every response.
    """

    HEADER = "HTTP_X_REQUEST_ID"
    RESPONSE_HEADER = "X-Request-ID"

    def process_request(self, request):
        """Attach the request id to the request and the context variable.

        Args:
            request: Django HttpRequest instance.
        """
        rid = request.META.get(self.HEADER) or str(uuid.uuid4())
        request.request_id = rid
        request._started_at = time.monotonic()
        REQUEST_ID_CTX.set(rid)

    def process_response(self, request, response):
        """Set the response header and emit the access log line.

        Args:
            request: Django HttpRequest (may lack our attributes when an
                earlier middleware short-circuited).
            response: Django HttpResponse to modify.

        Returns:
            The same response with ``X-Request-ID`` set.
        """
        rid = getattr(request, "request_id", REQUEST_ID_CTX.get())
        response[self.RESPONSE_HEADER] = rid
        started = getattr(request, "_started_at", None)
        elapsed_ms = round((time.monotonic() - started) * 1000, 2) if started else None
        logger.info(
            "request handled",
            extra={
                "path": request.path,
                "method": request.method,
                "status": response.status_code,
                "elapsed_ms": elapsed_ms,
            },
        )
        return response


class ApiSizeLimitMiddleware(MiddlewareMixin):
    def process_request(self, request):
        if request.path.startswith("/api/"):
            clen = request.META.get("CONTENT_LENGTH")
            if clen and clen.isdigit() and int(clen) > MAX_API_BYTES:
                return JsonResponse(
                    {"detail": "PAYLOAD_TOO_LARGE", "message": f"Request body exceeds {MAX_API_BYTES} bytes"},
                    status=413,
                )
