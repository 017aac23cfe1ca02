"""Data models for the profile engine.

This module defines the canonical, typed representation of a profile record
and the two default-record factories.

The models in this module are intentionally standard-library-only (dataclasses)
to keep the core engine lightweight and deterministic.

Notes
-----
Records have no natural key. Each record carries an internal surrogate
``record_id`` assigned at creation time; it is used for lookup, replacement and
removal, and is excluded from equality so two records compare field-for-field.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Final, Mapping, Self

from .errors import UnknownFieldError

DEFAULT_PICTURE_URI: Final[str] = (
    "https://aboutreact.com/wp-content/uploads/2018/07/react_native_imageview.png"
)

# Attribute name -> wire key, in display order.
WIRE_KEYS: Final[dict[str, str]] = {
    "first_name": "firstName",
    "last_name": "lastName",
    "date_of_birth": "dateOfBirth",
    "nationality": "nationality",
    "short_bio": "shortBio",
    "picture": "picture",
}

TEXT_FIELDS: Final[tuple[str, ...]] = (
    "first_name",
    "last_name",
    "date_of_birth",
    "nationality",
    "short_bio",
)

EDITABLE_FIELDS: Final[tuple[str, ...]] = TEXT_FIELDS + ("picture",)

# Key written by earlier releases for the date of birth.
_LEGACY_DOB_KEY: Final[str] = "dob"


def new_record_id() -> str:
    """
    Return a fresh surrogate identifier for a record.

    Returns
    -------
    str
        A random UUID4 rendered as 32 hex characters.
    """
    return uuid.uuid4().hex


def _require_keys(payload: Mapping[str, Any], keys: set[str], *, context: str) -> None:
    missing = keys.difference(payload.keys())
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ValueError(f"Missing required keys in {context}: {missing_str}")


def _require_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload[key]
    if not isinstance(value, str):
        raise ValueError(f"Expected string for {key!r}, got {type(value).__name__}")
    return value


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is not None and not isinstance(value, str):
        raise ValueError(f"Expected string or null for {key!r}, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class ProfileRecord:
    """
    A single user profile.

    Attributes
    ----------
    first_name:
        Given name.
    last_name:
        Family name.
    date_of_birth:
        Date of birth as ``YYYY-MM-DD`` text (shape only, not calendar-checked).
    nationality:
        Free-text nationality.
    short_bio:
        Short free-text biography.
    picture:
        Optional image URI. ``None`` renders as a placeholder.
    record_id:
        Internal surrogate key. Not part of equality.
    """

    first_name: str
    last_name: str
    date_of_birth: str
    nationality: str
    short_bio: str
    picture: str | None = None
    record_id: str = field(default_factory=new_record_id, compare=False, repr=False)

    @property
    def display_name(self) -> str:
        """Return ``"<first> <last>"`` for list and header rendering."""
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Self:
        """
        Construct a :class:`ProfileRecord` from a wire mapping.

        Parameters
        ----------
        payload:
            Mapping keyed by wire names. The legacy ``dob`` key is accepted in
            place of ``dateOfBirth``; ``picture`` and ``id`` may be absent.

        Returns
        -------
        ProfileRecord
            The decoded record. A fresh surrogate id is assigned when ``id`` is absent.

        Raises
        ------
        ValueError
            If a required key is missing or a value has the wrong JSON type.
        """
        data = dict(payload)
        if "dateOfBirth" not in data and _LEGACY_DOB_KEY in data:
            data["dateOfBirth"] = data[_LEGACY_DOB_KEY]

        _require_keys(
            data,
            {"firstName", "lastName", "dateOfBirth", "nationality", "shortBio"},
            context="record",
        )
        picture = _optional_str(data, "picture")
        record_id = _optional_str(data, "id")
        return cls(
            first_name=_require_str(data, "firstName"),
            last_name=_require_str(data, "lastName"),
            date_of_birth=_require_str(data, "dateOfBirth"),
            nationality=_require_str(data, "nationality"),
            short_bio=_require_str(data, "shortBio"),
            picture=picture,
            record_id=record_id or new_record_id(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert this record to a JSON-serializable dict keyed by wire names."""
        payload: dict[str, Any] = {"id": self.record_id}
        for attr, key in WIRE_KEYS.items():
            payload[key] = getattr(self, attr)
        return payload


def with_field(draft: ProfileRecord, name: str, value: str | None) -> ProfileRecord:
    """
    Return a copy of ``draft`` with one editable field changed.

    Parameters
    ----------
    draft:
        Record under construction or edit.
    name:
        Attribute name of an editable field (see ``EDITABLE_FIELDS``).
    value:
        New value. ``None`` is only meaningful for ``picture``.

    Returns
    -------
    ProfileRecord
        A copy carrying the same surrogate id.

    Raises
    ------
    UnknownFieldError
        If ``name`` is not an editable field.
    """
    if name not in EDITABLE_FIELDS:
        raise UnknownFieldError(f"Not an editable record field: {name!r}")
    if name != "picture" and value is None:
        value = ""
    return replace(draft, **{name: value})


def builtin_default_record() -> ProfileRecord:
    """
    Return the built-in default record.

    Used to seed an empty store on first run and as the template for new drafts.
    Each call returns a record with a fresh surrogate id.
    """
    return ProfileRecord(
        first_name="John",
        last_name="Doe",
        date_of_birth="1990-01-01",
        nationality="American",
        short_bio="Software Engineer.",
        picture=DEFAULT_PICTURE_URI,
    )


def selection_placeholder() -> ProfileRecord:
    """
    Return the transient record selected when the store holds no records.

    It shows the built-in default values but is a separate object with its own
    surrogate id. It is never inserted into the record list and never persisted.
    """
    return replace(builtin_default_record(), record_id=new_record_id())
