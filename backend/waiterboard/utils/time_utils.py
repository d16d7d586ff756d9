from datetime import datetime, timezone


def utcnow() -> datetime:
    """
    Current UTC time as a naive datetime.
    All timestamps are stored naive-UTC so SQLite and PostgreSQL compare alike.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
