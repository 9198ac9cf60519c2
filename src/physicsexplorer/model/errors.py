"""
Validation errors raised while turning raw form input into a ParameterSet.

All of them are user-correctable; the message (``str(error)``) is meant to be
shown as-is next to the form.
"""
from __future__ import annotations


class ValidationError(ValueError):
    """Base class for every input problem found by the validator."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    @property
    def message(self) -> str:
        return str(self)


class MissingField(ValidationError):
    """A required field (or the mode selector) was left empty."""

    def __init__(self, field: str, label: str | None = None) -> None:
        super().__init__(f"Please enter a value for {label or field}.", field)


class NotANumber(ValidationError):
    """The raw text could not be read as a finite number."""

    def __init__(self, field: str, raw: str, label: str | None = None) -> None:
        super().__init__(f"{label or field} must be a number (got {raw!r}).", field)
        self.raw = raw


class ConstraintViolation(ValidationError):
    """A parsed value breaks a per-field or cross-field rule."""

    def __init__(self, detail: str, field: str | None = None) -> None:
        super().__init__(detail, field)
        self.detail = detail
