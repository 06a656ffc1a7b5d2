"""Submission volume bucketed into fixed day or week windows."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, List

from pydantic import BaseModel

from ._time import as_naive_utc

WINDOWS = {"day": timedelta(days=1), "week": timedelta(days=7)}


class VolumePoint(BaseModel):
    name: str
    start: datetime
    value: int


def bucket_volume(
    timestamps: Iterable[datetime],
    now: datetime,
    *,
    window: str = "day",
    periods: int = 5,
) -> List[VolumePoint]:
    """
    Count timestamps per window for the ``periods`` windows ending today.

    Buckets are returned oldest first and labelled ``MM/DD`` of their start.
    Timestamps outside the covered range are ignored.
    """

    if window not in WINDOWS:
        raise ValueError(f"Unknown window '{window}' (allowed: {', '.join(WINDOWS)})")
    if periods < 1:
        raise ValueError("periods must be at least 1")

    step = WINDOWS[window]
    today = as_naive_utc(now).replace(hour=0, minute=0, second=0, microsecond=0)
    end = today + timedelta(days=1)
    first = end - step * periods

    counts = [0] * periods
    for stamp in timestamps:
        stamp = as_naive_utc(stamp)
        if first <= stamp < end:
            counts[int((stamp - first) // step)] += 1

    points = []
    for index, value in enumerate(counts):
        start = first + step * index
        points.append(VolumePoint(name=start.strftime("%m/%d"), start=start, value=value))
    return points
