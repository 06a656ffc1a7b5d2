"""Errors raised by the ideas client."""

from __future__ import annotations

from typing import Dict, Optional


class ApiError(Exception):
    """A request failed: non-2xx response, or no response at all (``status_code`` is None)."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(f"{status_code or 'network'}: {message}")
        self.status_code = status_code
        self.message = message


class WizardValidationError(ValueError):
    """Form fields failed validation; ``errors`` maps field name to message."""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{field}: {message}" for field, message in errors.items()))
        self.errors = errors
