from datetime import UTC, datetime, timedelta

from fastapi import Request


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def utc_date(days_ago: int = 0) -> str:
    """Return a UTC calendar date (``YYYY-MM-DD``), optionally in the past."""
    return (datetime.now(tz=UTC) - timedelta(days=days_ago)).date().isoformat()
