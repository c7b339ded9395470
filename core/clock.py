from datetime import datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def aware(dt: datetime) -> datetime:
    """Return `dt` as an aware UTC datetime.

    Naive values are what SQLite hands back and are read as UTC. Aware values
    in any other offset are converted, because SQLite keeps the wall-clock
    time and drops the offset on write.
    """
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def require_utc(dt: datetime) -> datetime:
    """Validator helper: reject naive input, normalise aware input to UTC."""
    if dt.tzinfo is None or dt.tzinfo.utcoffset(dt) is None:
        raise ValueError("Datetime must be timezone-aware (e.g., 2025-10-16T09:00:00Z)")
    return dt.astimezone(timezone.utc)
