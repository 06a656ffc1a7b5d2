"""Status tracker: a linear rendering of the fixed lifecycle steps."""

from __future__ import annotations

from enum import Enum
from typing import List, Union

from pydantic import BaseModel

from ideas_repo.lifecycle import normalize_status
from ideas_repo.models import IdeaStatus


class StepState(str, Enum):
    COMPLETE = "complete"
    CURRENT = "current"
    PENDING = "pending"


class TrackerStep(BaseModel):
    status: IdeaStatus
    label: str
    description: str
    state: StepState = StepState.PENDING


TRACKER_STEPS = (
    (IdeaStatus.SUBMITTED, "Submitted", "Idea has been submitted and is awaiting review"),
    (IdeaStatus.IN_REVIEW, "In Review", "Idea is currently being evaluated by the review team"),
    (IdeaStatus.IN_REFINEMENT, "Merged", "Idea has been merged into the implementation pipeline"),
    (IdeaStatus.IMPLEMENTED, "Implemented", "Idea has been successfully implemented"),
    (IdeaStatus.PARKED, "Parked", "Idea has been parked for future consideration"),
)


def build_tracker(current: Union[str, IdeaStatus]) -> List[TrackerStep]:
    """
    Render every tracker step for ``current``.

    Steps before the current one are complete, later ones pending. A status
    that is not on the tracker (``closed``) leaves every step pending.
    """

    status = normalize_status(current)
    statuses = [step[0] for step in TRACKER_STEPS]
    current_index = statuses.index(status) if status in statuses else -1

    steps = []
    for index, (step_status, label, description) in enumerate(TRACKER_STEPS):
        if current_index < 0 or index > current_index:
            state = StepState.PENDING
        elif index == current_index:
            state = StepState.CURRENT
        else:
            state = StepState.COMPLETE
        steps.append(TrackerStep(status=step_status, label=label, description=description, state=state))
    return steps
