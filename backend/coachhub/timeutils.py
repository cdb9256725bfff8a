from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today() -> date:
    """Calendar day in UTC, the same clock as utcnow()."""
    return utcnow().date()


def ensure_utc(value: datetime) -> datetime:
    """sqlite hands back naive datetimes; treat them as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
