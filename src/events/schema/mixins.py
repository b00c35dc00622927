import typing as t
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import AfterValidator, HttpUrl, PlainSerializer


def validate_timezone(value: str) -> str:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {value}") from e
    return value


# Validated as an http(s) URL, handed to the ORM as a plain string.
UrlString = t.Annotated[HttpUrl, PlainSerializer(str, return_type=str)]
TimezoneString = t.Annotated[str, AfterValidator(validate_timezone)]
