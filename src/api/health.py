"""Database round trip check for the health endpoint."""

import time
import typing as t
from dataclasses import dataclass

import structlog
from django.db import DatabaseError, connection

logger = structlog.get_logger(__name__)

HealthStatus = t.Literal["healthy", "degraded", "unhealthy"]

# A database slower than this still works but reports as degraded.
DEGRADED_LATENCY_MS = 1000


@dataclass(frozen=True)
class DatabaseCheck:
    status: HealthStatus
    latency_ms: int | None = None
    error: str | None = None


def check_database() -> DatabaseCheck:
    started = time.monotonic()
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error("health_database_unreachable", error=str(e))
        return DatabaseCheck(status="unhealthy", error=str(e))
    latency_ms = round((time.monotonic() - started) * 1000)
    status: HealthStatus = "degraded" if latency_ms > DEGRADED_LATENCY_MS else "healthy"
    return DatabaseCheck(status=status, latency_ms=latency_ms)
