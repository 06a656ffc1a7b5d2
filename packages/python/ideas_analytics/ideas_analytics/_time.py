from __future__ import annotations

from datetime import datetime, timezone


def as_naive_utc(value: datetime) -> datetime:
    """Drop tzinfo after converting to UTC so aware and naive values compare."""

    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
