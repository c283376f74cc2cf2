"""Liveness endpoint: process is up and the database answers."""

import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def _database_ok() -> bool:
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1")
    except DatabaseError:
        logger.exception("health check: database unreachable")
        return False
    return True


def health_view(_request):
    db_ok = _database_ok()
    return JsonResponse(
        {
            "ok": db_ok,
            "environment": settings.ENVIRONMENT,
            "components": {"db": {"ok": db_ok}},
        },
        status=200 if db_ok else 503,
    )
