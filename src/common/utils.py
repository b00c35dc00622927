import re
import typing as t
from datetime import datetime

from django.utils import timezone


def generate_slug(text: str) -> str:
    """Turn free text into a URL-friendly slug.

    Lowercases, drops anything that is not a word character, whitespace or dash,
    collapses runs of whitespace, underscores and dashes into a single dash and trims
    dashes from both ends.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


def generate_unique_slug(text: str, exists: t.Callable[[str], bool]) -> str:
    """Generate a slug that ``exists`` reports as free, appending ``-1``, ``-2``... on collision."""
    base_slug = generate_slug(text)
    slug = base_slug
    counter = 1
    while exists(slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def escape_csv_field(value: t.Any) -> str:
    """Render a value as a CSV field, quoting it when it contains separators, quotes or newlines."""
    if value is None:
        return ""
    text = str(value)
    if any(char in text for char in (",", '"', "\n", "\r")):
        return '"' + text.replace('"', '""') + '"'
    return text


def generate_csv(headers: t.Sequence[str], rows: t.Iterable[t.Sequence[t.Any]]) -> str:
    """Build a CSV document with CRLF line endings."""
    lines = [",".join(escape_csv_field(header) for header in headers)]
    lines.extend(",".join(escape_csv_field(cell) for cell in row) for row in rows)
    return "\r\n".join(lines)


def format_date_for_csv(value: datetime | None) -> str:
    """Format a datetime as ``YYYY-MM-DD HH:MM`` in UTC, or an empty string."""
    if value is None:
        return ""
    return timezone.localtime(value, timezone.get_fixed_timezone(0)).strftime("%Y-%m-%d %H:%M")


def format_event_date(value: datetime) -> str:
    """E.g. ``Saturday, June 14, 2025``."""
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def format_event_time(value: datetime) -> str:
    """E.g. ``5:30 PM``."""
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {value:%p}"


def format_long_date(value: datetime) -> str:
    """E.g. ``June 14, 2025``."""
    return f"{value:%B} {value.day}, {value.year}"
