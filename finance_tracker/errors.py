"""Exception taxonomy shared by the store, auth and form layers.

Every error is safe to show to the user: pages catch ``FinanceTrackerError``
at the operation boundary and render ``str(exc)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation failure."""

    field: str
    message: str


class FinanceTrackerError(Exception):
    """Base class for user-displayable errors."""


class FetchError(FinanceTrackerError):
    """Listing or reading records from the backend failed."""


class UnauthorizedError(FinanceTrackerError):
    """A record does not belong to the current session user."""


class InsertError(FinanceTrackerError):
    """Creating a record failed."""


class UpdateError(FinanceTrackerError):
    """Updating a record failed."""


class DeleteError(FinanceTrackerError):
    """Deleting a record failed."""


class AuthError(FinanceTrackerError):
    """Sign-in, sign-up, password change or account deletion failed."""


class ValidationError(FinanceTrackerError):
    """Client-side validation failed; no backend call was made."""

    def __init__(self, errors: Sequence[FieldError] | str):
        if isinstance(errors, str):
            errors = [FieldError("__all__", errors)]
        self.errors: List[FieldError] = list(errors)
        super().__init__("; ".join(err.message for err in self.errors))

    def as_dict(self) -> dict:
        """Map field name to the first message reported for it."""
        result: dict = {}
        for err in self.errors:
            result.setdefault(err.field, err.message)
        return result
