"""Multi-step submission wizard for ideas, challenges and pain points."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from pydantic import ValidationError

from ideas_repo.models import Idea

from .client import IdeasClient, MediaFile
from .drafts import DraftStore
from .errors import WizardValidationError
from .forms import STEPS, SubmissionForm, WizardStep, form_for


def _field_errors(exc: ValidationError, fields: Optional[Sequence[str]] = None) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = str(error["loc"][0]) if error["loc"] else "__root__"
        if fields is not None and field not in fields:
            continue
        errors.setdefault(field, error["msg"])
    return errors


class SubmissionWizard:
    """
    Collects form values step by step and posts the finished payload.

    Validation is synchronous and happens before any request: ``next()``
    checks the current step's fields, ``submit()`` checks the whole form.
    When a ``DraftStore`` is given, values are restored from and saved to the
    form type's draft snapshot; a successful submit clears it.
    """

    def __init__(
        self,
        form_type: str,
        values: Optional[Dict[str, Any]] = None,
        *,
        drafts: Optional[DraftStore] = None,
    ):
        self.form_type = form_type
        self.form: type[SubmissionForm] = form_for(form_type)
        self.steps: Sequence[WizardStep] = STEPS[form_type]
        self.drafts = drafts
        self.current_step = 0
        self.media: List[MediaFile] = []

        restored = drafts.load(form_type) if drafts and values is None else None
        self.values: Dict[str, Any] = dict(values or restored or {})

    @property
    def step(self) -> WizardStep:
        return self.steps[self.current_step]

    @property
    def is_last_step(self) -> bool:
        return self.current_step == len(self.steps) - 1

    @property
    def progress(self) -> float:
        return (self.current_step + 1) / len(self.steps)

    def set(self, **values: Any) -> None:
        self.values.update(values)

    def attach_media(self, filename: str, content: bytes, content_type: str = "application/octet-stream") -> None:
        """Attach a file or recorded voice note; sent as ``media`` parts on submit."""

        self.media.append((filename, content, content_type))

    def errors(self, fields: Optional[Sequence[str]] = None) -> Dict[str, str]:
        try:
            self.form.model_validate(self.values)
        except ValidationError as exc:
            return _field_errors(exc, fields)
        return {}

    def next(self) -> WizardStep:
        """Advance if the current step validates; raises ``WizardValidationError`` otherwise."""

        errors = self.errors(self.step.fields)
        if errors:
            raise WizardValidationError(errors)
        if not self.is_last_step:
            self.current_step += 1
        self.save_draft()
        return self.step

    def back(self) -> WizardStep:
        if self.current_step > 0:
            self.current_step -= 1
        return self.step

    def save_draft(self) -> None:
        if self.drafts is not None:
            self.drafts.save(self.form_type, self.values)

    def build_payload(self) -> Dict[str, Any]:
        try:
            form = self.form.model_validate(self.values)
        except ValidationError as exc:
            raise WizardValidationError(_field_errors(exc)) from exc
        return form.model_dump(mode="json", exclude_none=True)

    async def submit(self, client: IdeasClient) -> Idea:
        """Validate everything, then POST; nothing is sent when validation fails."""

        payload = self.build_payload()
        idea = await client.submit_idea(payload, media=self.media)
        logger.info("Submitted {form_type} {idea_id}", form_type=self.form_type, idea_id=idea.id)
        if self.drafts is not None:
            self.drafts.clear(self.form_type)
        return idea
