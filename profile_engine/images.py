"""
Image selection contract.

The engine does not browse files or talk to a camera roll. Presentation code
provides an :class:`ImagePicker`; the engine only applies its result to a draft.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

from .data_models import ProfileRecord


@dataclass(frozen=True, slots=True)
class PickResult:
    """
    Outcome of an image selection.

    Attributes
    ----------
    cancelled:
        True if the user dismissed the picker.
    uri:
        URI of the chosen image. Set only when not cancelled.
    """

    cancelled: bool
    uri: str | None = None

    def __post_init__(self) -> None:
        if not self.cancelled and not self.uri:
            raise ValueError("A non-cancelled pick result requires a uri.")

    @staticmethod
    def cancelled_result() -> "PickResult":
        return PickResult(cancelled=True)

    @staticmethod
    def chosen(uri: str) -> "PickResult":
        return PickResult(cancelled=False, uri=uri)


class ImagePicker(Protocol):
    """Service that lets the user choose an image."""

    def pick_image(self) -> PickResult:
        """
        Ask the user for an image.

        Returns
        -------
        PickResult
            The chosen URI, or a cancellation.
        """
        ...


def apply_pick_result(draft: ProfileRecord, result: PickResult) -> ProfileRecord:
    """
    Apply an image selection to a draft.

    Parameters
    ----------
    draft:
        Record under construction or edit.
    result:
        Picker outcome.

    Returns
    -------
    ProfileRecord
        ``draft`` unchanged on cancellation, otherwise a copy whose picture is the URI.
    """
    if result.cancelled:
        return draft
    return replace(draft, picture=result.uri)
