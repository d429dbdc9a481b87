"""UTC datetime utilities.

Stored order documents carry timestamps as ISO strings (often with a "Z"
suffix) or as naive datetimes that are UTC by convention.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: datetime | str | None) -> datetime | None:
    """Timezone-aware datetime from an ISO string or datetime; naive values are taken as UTC.

    Raises:
        ValueError: ``value`` is a string that is not ISO 8601.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value
