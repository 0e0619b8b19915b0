"""Helpers shared by the export formats."""

from datetime import UTC, datetime


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO 8601 UTC with millisecond precision."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")
