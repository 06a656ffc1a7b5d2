import pytest

from ideas_repo.errors import InvalidStatusError, InvalidStatusTransitionError
from ideas_repo.lifecycle import can_transition, ensure_transition, normalize_status
from ideas_repo.models import IdeaStatus


@pytest.mark.parametrize(
    "current, target",
    [
        ("submitted", "in-review"),
        ("submitted", "implemented"),
        ("in-review", "in-refinement"),
        ("in-review", "parked"),
        ("parked", "in-refinement"),
        ("in-refinement", "parked"),
        ("implemented", "closed"),
    ],
)
def test_forward_moves_are_allowed(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize(
    "current, target",
    [
        ("in-review", "submitted"),
        ("implemented", "in-review"),
        ("parked", "in-review"),
        ("submitted", "submitted"),
        ("closed", "implemented"),
        ("closed", "closed"),
    ],
)
def test_backward_same_and_terminal_moves_are_rejected(current, target):
    assert not can_transition(current, target)
    with pytest.raises(InvalidStatusTransitionError):
        ensure_transition(current, target)


def test_merged_is_an_alias_for_in_refinement():
    assert normalize_status("Merged") is IdeaStatus.IN_REFINEMENT
    assert ensure_transition("in-review", "merged") is IdeaStatus.IN_REFINEMENT


def test_unknown_status_is_rejected():
    with pytest.raises(InvalidStatusError):
        normalize_status("archived")


def test_transition_error_names_both_statuses():
    with pytest.raises(InvalidStatusTransitionError, match="implemented.*in-review"):
        ensure_transition(IdeaStatus.IMPLEMENTED, IdeaStatus.IN_REVIEW)
