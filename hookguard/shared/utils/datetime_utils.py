# hookguard/shared/utils/datetime_utils.py

from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime.

    Timestamps are stored naive (UTC) so they compare the same way on
    PostgreSQL ``timestamp`` columns and on SQLite.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
