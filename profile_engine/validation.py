"""
Field validation for profile records.

This module provides deterministic, string-only checks for a candidate record.
It performs no I/O and never mutates the candidate.

Invariants
----------
- Every text field must be non-empty after stripping whitespace.
- Date of birth must have the shape YYYY-MM-DD (ASCII digits); calendar
  validity is not checked.
- The picture field is optional and never validated.
- An empty result mapping is the only success signal.
"""

from __future__ import annotations

import re
from typing import Final

from .data_models import TEXT_FIELDS, ProfileRecord

DATE_OF_BIRTH_PATTERN: Final[re.Pattern[str]] = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

FIELD_LABELS: Final[dict[str, str]] = {
    "first_name": "First name",
    "last_name": "Last name",
    "date_of_birth": "Date of Birth",
    "nationality": "Nationality",
    "short_bio": "Short Bio",
}

DATE_OF_BIRTH_FORMAT_MESSAGE: Final[str] = "Date of Birth must be in the format YYYY-MM-DD"


def validate_record(candidate: ProfileRecord) -> dict[str, str]:
    """
    Validate a candidate record.

    Parameters
    ----------
    candidate:
        Draft record to check.

    Returns
    -------
    dict[str, str]
        Mapping of attribute name to user-facing message. Empty if and only if
        the candidate may be persisted.
    """
    errors: dict[str, str] = {}
    for name in TEXT_FIELDS:
        value = getattr(candidate, name)
        if not value.strip():
            errors[name] = f"{FIELD_LABELS[name]} is required"

    # The format check runs on the raw value, so surrounding whitespace fails it.
    dob = candidate.date_of_birth
    if "date_of_birth" not in errors and DATE_OF_BIRTH_PATTERN.fullmatch(dob) is None:
        errors["date_of_birth"] = DATE_OF_BIRTH_FORMAT_MESSAGE

    return errors
