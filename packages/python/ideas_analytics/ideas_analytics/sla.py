"""Display-only review countdown computed from an idea's creation date."""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel

from ._time import as_naive_utc

SLA_DAYS = 3
_SECONDS_PER_DAY = 24 * 60 * 60


class SlaStatus(BaseModel):
    label: str
    tone: str
    days_open: int


def sla_status(created_at: datetime, now: datetime) -> SlaStatus:
    elapsed = (as_naive_utc(now) - as_naive_utc(created_at)).total_seconds()
    days_open = max(0, math.ceil(elapsed / _SECONDS_PER_DAY))

    if days_open > SLA_DAYS:
        return SlaStatus(label="Overdue", tone="overdue", days_open=days_open)
    if days_open >= SLA_DAYS - 1:
        return SlaStatus(label="1 day left", tone="warning", days_open=days_open)
    return SlaStatus(label=f"{SLA_DAYS - days_open} days left", tone="ok", days_open=days_open)
