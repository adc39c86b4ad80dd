"""UTC timestamp formatting shared by the catalog document."""

from datetime import datetime, timezone
from typing import Literal


def format_timestamp(
    value: datetime,
    *,
    timespec: Literal["seconds", "milliseconds"] = "seconds",
) -> str:
    """
    Render a timestamp as ISO-8601 UTC with a "Z" suffix.

    Naive datetimes are taken to be UTC already.

    Example:
        >>> format_timestamp(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        '2024-01-02T03:04:05Z'
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec=timespec).replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
