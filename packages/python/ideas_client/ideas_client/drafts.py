"""Local draft snapshots for submission forms, keyed by form type."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

from .config import settings
from .forms import DRAFT_KEYS


class DraftStore:
    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory or settings.drafts_dir)

    def _path(self, form_type: str) -> Path:
        try:
            key = DRAFT_KEYS[form_type]
        except KeyError:
            raise ValueError(f"Unknown form type '{form_type}'") from None
        return self.directory / f"{key}.json"

    def save(self, form_type: str, values: Dict[str, Any]) -> Path:
        path = self._path(form_type)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(values, indent=2, default=str), encoding="utf-8")
        logger.debug("Saved {form_type} draft to {path}", form_type=form_type, path=path)
        return path

    def load(self, form_type: str) -> Optional[Dict[str, Any]]:
        path = self._path(form_type)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as exc:
            logger.warning("Ignoring unreadable draft {path}: {error}", path=path, error=exc)
            return None
        return data if isinstance(data, dict) else None

    def clear(self, form_type: str) -> None:
        self._path(form_type).unlink(missing_ok=True)
