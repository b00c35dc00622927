from datetime import datetime

from ninja import Schema

from api.health import HealthStatus


class DatabaseHealthSchema(Schema):
    status: HealthStatus
    latency_ms: int | None = None
    error: str | None = None


class HealthChecksSchema(Schema):
    database: DatabaseHealthSchema


class HealthSchema(Schema):
    status: HealthStatus
    timestamp: datetime
    version: str
    checks: HealthChecksSchema
