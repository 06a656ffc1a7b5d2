"""Status lifecycle of an idea.

Ideas only move forward along a fixed ordering::

    submitted -> in-review -> in-refinement | parked -> implemented -> closed

``in-refinement`` is shown as "Merged" and the legacy value ``merged`` is
accepted as an alias. ``parked`` shares a rank with ``in-refinement`` so a
parked idea can be picked up again.
"""

from __future__ import annotations

from typing import Union

from .errors import InvalidStatusError, InvalidStatusTransitionError
from .models import IdeaStatus

STATUS_ORDER = (
    IdeaStatus.SUBMITTED,
    IdeaStatus.IN_REVIEW,
    IdeaStatus.IN_REFINEMENT,
    IdeaStatus.PARKED,
    IdeaStatus.IMPLEMENTED,
    IdeaStatus.CLOSED,
)

STATUS_RANK = {
    IdeaStatus.SUBMITTED: 0,
    IdeaStatus.IN_REVIEW: 1,
    IdeaStatus.IN_REFINEMENT: 2,
    IdeaStatus.PARKED: 2,
    IdeaStatus.IMPLEMENTED: 3,
    IdeaStatus.CLOSED: 4,
}

STATUS_ALIASES = {"merged": IdeaStatus.IN_REFINEMENT}


def normalize_status(value: Union[str, IdeaStatus]) -> IdeaStatus:
    if isinstance(value, IdeaStatus):
        return value
    key = str(value).strip().lower()
    if key in STATUS_ALIASES:
        return STATUS_ALIASES[key]
    try:
        return IdeaStatus(key)
    except ValueError:
        allowed = ", ".join(status.value for status in STATUS_ORDER)
        raise InvalidStatusError(f"Unknown status '{value}' (allowed: {allowed})") from None


def can_transition(current: Union[str, IdeaStatus], target: Union[str, IdeaStatus]) -> bool:
    current = normalize_status(current)
    target = normalize_status(target)
    if current == target or current == IdeaStatus.CLOSED:
        return False
    return STATUS_RANK[target] >= STATUS_RANK[current]


def ensure_transition(current: Union[str, IdeaStatus], target: Union[str, IdeaStatus]) -> IdeaStatus:
    """Return the normalized target status or raise if the move is not allowed."""

    current_status = normalize_status(current)
    target_status = normalize_status(target)
    if not can_transition(current_status, target_status):
        raise InvalidStatusTransitionError(current_status.value, target_status.value)
    return target_status
