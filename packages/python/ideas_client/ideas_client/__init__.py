"""Async client for the ideas API with toggles, wizards and draft snapshots."""

from .cache import QueryCache
from .client import IdeasClient, IdeaView
from .drafts import DraftStore
from .errors import ApiError, WizardValidationError
from .forms import ChallengeForm, IdeaForm, PainPointForm, WizardStep
from .toggles import FollowToggle, VoteToggle
from .wizard import SubmissionWizard

__all__ = [
    "ApiError",
    "ChallengeForm",
    "DraftStore",
    "FollowToggle",
    "IdeaForm",
    "IdeaView",
    "IdeasClient",
    "PainPointForm",
    "QueryCache",
    "SubmissionWizard",
    "VoteToggle",
    "WizardStep",
    "WizardValidationError",
]
