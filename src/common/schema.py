"""Common schemas for the API."""

import typing as t

from ninja import Schema
from pydantic import StringConstraints

T = t.TypeVar("T")

StrippedString = t.Annotated[str, StringConstraints(strip_whitespace=True)]


class DataResponse(Schema, t.Generic[T]):
    """Success envelope: ``{"data": ...}``."""

    data: T


class VersionResponse(Schema):
    version: str


class PaginationSchema(Schema):
    total: int
    limit: int
    offset: int
    has_more: bool


def paginate(queryset: t.Any, limit: int, offset: int) -> tuple[list[t.Any], PaginationSchema]:
    """Slice a queryset and describe the page."""
    total = queryset.count()
    items = list(queryset[offset : offset + limit])
    return items, PaginationSchema(
        total=total,
        limit=limit,
        offset=offset,
        has_more=offset + len(items) < total,
    )
