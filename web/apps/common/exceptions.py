"""DRF exception handler rendering the API error envelope.

Every error response has the shape::

    {"detail": "<CODE>", "message": "<human readable>", ...extras}

``DomainError`` subclasses map through their own ``status_code``/``code``;
pydantic ``ValidationError`` becomes 400 ``VALIDATION_ERROR`` with the list
of field errors; DRF's own exceptions (authentication failures, malformed
JSON, throttling, 404/405) keep their status codes. Anything else is logged
with its traceback and returned as a generic 500. Internal detail is only
added under ``error`` when ``DEBUG`` is on.
"""

import logging

from django.conf import settings
from pydantic import ValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import DomainError

logger = logging.getLogger(__name__)


def _pydantic_errors(exc: ValidationError) -> list[dict]:
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def api_exception_handler(exc, context):
    """Translate an exception raised inside a DRF view into a Response.

    Args:
        exc: The exception raised by the view (or by authentication).
        context: DRF context dict (``view``, ``request``, ...).

    Returns:
        Response: JSON error response following the envelope above.
    """
    if isinstance(exc, DomainError):
        body = {"detail": exc.code, "message": exc.message, **exc.extra}
        return Response(body, status=exc.status_code)

    if isinstance(exc, ValidationError):
        body = {
            "detail": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "errors": _pydantic_errors(exc),
        }
        return Response(body, status=status.HTTP_400_BAD_REQUEST)

    response = exception_handler(exc, context)
    if response is not None:
        codes = getattr(exc, "get_codes", lambda: None)()
        code = codes if isinstance(codes, str) else getattr(exc, "default_code", None)
        if code is None:
            code = {403: "forbidden", 404: "not_found"}.get(response.status_code, "error")
        original = response.data.get("detail", "") if isinstance(response.data, dict) else response.data
        response.data = {"detail": str(code).upper(), "message": str(original)}
        return response

    view = context.get("view")
    logger.exception(
        "unhandled error",
        extra={"view": type(view).__name__ if view else None, "error_type": type(exc).__name__},
    )
    body = {"detail": "INTERNAL_ERROR", "message": "Something went wrong"}
    if settings.DEBUG:
        body["error"] = str(exc)
    return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
