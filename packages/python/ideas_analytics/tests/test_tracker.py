import pytest

from ideas_analytics.tracker import TRACKER_STEPS, StepState, build_tracker
from ideas_repo.models import IdeaStatus


@pytest.mark.parametrize("status", [step[0] for step in TRACKER_STEPS])
def test_exactly_one_current_step_with_prior_steps_complete(status):
    steps = build_tracker(status)
    states = [step.state for step in steps]
    current = states.index(StepState.CURRENT)

    assert states.count(StepState.CURRENT) == 1
    assert steps[current].status is status
    assert all(state is StepState.COMPLETE for state in states[:current])
    assert all(state is StepState.PENDING for state in states[current + 1 :])


def test_merged_label_and_alias():
    steps = build_tracker("merged")
    current = next(step for step in steps if step.state is StepState.CURRENT)
    assert current.status is IdeaStatus.IN_REFINEMENT
    assert current.label == "Merged"


def test_closed_is_off_the_tracker():
    assert all(step.state is StepState.PENDING for step in build_tracker("closed"))


def test_tracker_order():
    assert [step.label for step in build_tracker("submitted")] == [
        "Submitted",
        "In Review",
        "Merged",
        "Implemented",
        "Parked",
    ]
