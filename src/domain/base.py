from datetime import UTC, datetime


def utc_now() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns (no tzinfo stored)"""
    return datetime.now(UTC).replace(tzinfo=None)
