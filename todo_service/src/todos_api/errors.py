from __future__ import annotations

from datetime import datetime
from typing import Optional


class TodoServiceError(Exception):
    """Base class for every error surfaced by the TODO service."""


# PUBLIC_INTERFACE
class ValidationError(TodoServiceError):
    """Caller input failed a precondition (empty subject, zero id, empty id list)."""


# PUBLIC_INTERFACE
class ConstraintViolation(ValidationError):
    """A write would break a store constraint, e.g. an empty subject."""


# PUBLIC_INTERFACE
class NotFoundError(TodoServiceError):
    """
    A write affected zero rows.

    Attributes:
        when: Time the miss was detected.
        what: Human readable description of what was not found.
    """

    def __init__(self, what: str, when: Optional[datetime] = None) -> None:
        self.when = when or datetime.now()
        self.what = what
        super().__init__(f"{self.when.isoformat()}: {what}")


# PUBLIC_INTERFACE
class StoreError(TodoServiceError):
    """Any lower-level store failure: connection, statement preparation, row mapping."""
