from datetime import datetime, timezone


def to_iso_timestamp(dt: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 string with millisecond precision.

    Naive datetimes are taken to already be UTC. The trailing ``Z`` matches
    the format the code scanning endpoints expect for ``started_at`` fields.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    dt = dt.astimezone(timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")
