from datetime import UTC, datetime


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(UTC).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)
