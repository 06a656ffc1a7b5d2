"""Submission form schemas and their wizard steps, one per form type."""

from __future__ import annotations

from typing import Dict, List, NamedTuple, Optional, Tuple, Type

from pydantic import BaseModel, Field, field_validator

from ideas_repo.models import (
    DESCRIPTION_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
    IdeaCategory,
    parse_tags,
)


class WizardStep(NamedTuple):
    title: str
    description: str
    fields: Tuple[str, ...]


class SubmissionForm(BaseModel):
    title: str = Field(min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(min_length=DESCRIPTION_MIN_LENGTH)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags(cls, value):
        return parse_tags(value)


class IdeaForm(SubmissionForm):
    category: IdeaCategory = IdeaCategory.OPPORTUNITY
    impact: Optional[str] = None
    organization_category: Optional[str] = None
    inspiration: Optional[str] = None
    similar_solutions: Optional[str] = None


class ChallengeForm(SubmissionForm):
    category: IdeaCategory = IdeaCategory.CHALLENGE
    criteria: str = Field(min_length=5)
    timeframe: str = Field(min_length=1)
    reward: str = Field(min_length=1)


class PainPointForm(SubmissionForm):
    category: IdeaCategory = IdeaCategory.PAIN_POINT
    urgency: str = Field(min_length=1)
    root_cause: str = Field(min_length=10)


FORMS: Dict[str, Type[SubmissionForm]] = {
    "idea": IdeaForm,
    "challenge": ChallengeForm,
    "pain-point": PainPointForm,
}

STEPS: Dict[str, Tuple[WizardStep, ...]] = {
    "idea": (
        WizardStep("Basic Information", "Provide a title and category for your submission", ("title", "category")),
        WizardStep("Detailed Description", "Explain your idea in detail", ("description",)),
        WizardStep("Impact", "Describe the expected impact", ("impact", "organization_category")),
        WizardStep(
            "Additional Details",
            "Share inspiration, similar solutions and tags",
            ("inspiration", "similar_solutions", "tags"),
        ),
    ),
    "challenge": (
        WizardStep("Basic Information", "Name the challenge", ("title",)),
        WizardStep("Detailed Description", "Describe the challenge", ("description",)),
        WizardStep("Success Criteria", "How will solutions be judged", ("criteria", "timeframe", "reward")),
        WizardStep("Tags", "Help others find the challenge", ("tags",)),
    ),
    "pain-point": (
        WizardStep("Basic Information", "Name the pain point", ("title",)),
        WizardStep("Detailed Description", "Describe what hurts", ("description", "urgency")),
        WizardStep("Root Cause", "What causes it", ("root_cause", "tags")),
    ),
}

# Draft snapshot keys, one per form type.
DRAFT_KEYS = {
    "idea": "ideaDraft",
    "challenge": "challengeDraft",
    "pain-point": "painPointDraft",
}


def form_for(form_type: str) -> Type[SubmissionForm]:
    try:
        return FORMS[form_type]
    except KeyError:
        raise ValueError(f"Unknown form type '{form_type}' (allowed: {', '.join(FORMS)})") from None
