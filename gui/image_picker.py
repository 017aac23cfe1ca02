"""Qt implementation of the engine ImagePicker contract."""

from __future__ import annotations

from PySide6.QtCore import QUrl
from PySide6.QtWidgets import QFileDialog, QWidget

from profile_engine.images import PickResult

IMAGE_FILTER = "Images (*.png *.jpg *.jpeg *.bmp *.gif *.webp)"


class QtImagePicker:
    """
    Let the user choose a local image file.

    Notes
    -----
    Must be called on the UI thread. The result is a ``file://`` URI.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        self._parent = parent

    def pick_image(self) -> PickResult:
        """See ImagePicker.pick_image."""
        path, _selected_filter = QFileDialog.getOpenFileName(
            self._parent, "Upload an Image", "", IMAGE_FILTER
        )
        if not path:
            return PickResult.cancelled_result()
        return PickResult.chosen(QUrl.fromLocalFile(path).toString())
