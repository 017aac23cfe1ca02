"""
Record Editor dialog (UI only).

Purpose
-------
- Provide a single Create/Edit dialog for a profile record draft.
- Show engine-backed field validation next to each field.
- Let the user attach a picture through an ImagePicker.

Notes
-----
- The dialog never touches storage. The caller commits the returned draft.
- Validation is string-only and delegates to the engine validator.
"""

from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from profile_engine.data_models import TEXT_FIELDS, ProfileRecord, with_field
from profile_engine.images import ImagePicker, apply_pick_result
from profile_engine.validation import FIELD_LABELS, validate_record

_ERROR_STYLE = "color: red; font-size: 12px;"


class RecordEditorDialog(QDialog):
    """
    Dialog for creating or editing a single profile record.

    Responsibilities
    ----------------
    - Accumulate field edits into a draft record.
    - Block Save while the draft fails validation, showing each field's message.
    - Apply image selections to the draft.
    """

    def __init__(
        self,
        draft: ProfileRecord,
        picker: ImagePicker,
        parent: QWidget | None = None,
        *,
        title: str,
    ) -> None:
        """
        Initialize the record editor dialog.

        Parameters
        ----------
        draft:
            Initial draft (a fresh template for create, a copy for edit).
        picker:
            Image selection service used by "Upload an Image".
        parent:
            Optional parent widget.
        title:
            Window title text.
        """
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setModal(True)
        self.resize(360, 420)

        self._draft = draft
        self._picker = picker
        self._result: ProfileRecord | None = None
        self._edits: dict[str, QLineEdit] = {}
        self._errors: dict[str, QLabel] = {}

        root = QVBoxLayout(self)
        root.setContentsMargins(12, 12, 12, 12)
        root.setSpacing(6)

        for name in TEXT_FIELDS:
            edit = QLineEdit()
            placeholder = FIELD_LABELS[name]
            if name == "date_of_birth":
                placeholder = "Date of Birth (YYYY-MM-DD)"
            edit.setPlaceholderText(placeholder)
            edit.setText(getattr(draft, name))
            edit.textChanged.connect(lambda text, n=name: self._on_text_changed(n, text))

            err = QLabel("")
            err.setStyleSheet(_ERROR_STYLE)
            err.setVisible(False)

            root.addWidget(edit)
            root.addWidget(err)
            self._edits[name] = edit
            self._errors[name] = err

        self.picture_label = QLabel("")
        self.picture_label.setWordWrap(True)
        self.picture_label.setStyleSheet("color: #666;")
        root.addWidget(self.picture_label)

        self.btn_image = QPushButton("Upload an Image")
        self.btn_image.clicked.connect(self._pick_image)
        root.addWidget(self.btn_image)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Cancel)
        self.btn_save = self.buttons.addButton("Save", QDialogButtonBox.AcceptRole)
        self.buttons.rejected.connect(self.reject)
        self.btn_save.clicked.connect(self._on_save)
        root.addWidget(self.buttons)

        self._sync_picture()

    def result_value(self) -> ProfileRecord | None:
        return self._result

    # ---------------- Behavior ----------------

    def _on_text_changed(self, name: str, text: str) -> None:
        self._draft = with_field(self._draft, name, text)

    def _pick_image(self) -> None:
        self._draft = apply_pick_result(self._draft, self._picker.pick_image())
        self._sync_picture()

    def _sync_picture(self) -> None:
        self.picture_label.setText(f"Picture: {self._draft.picture or 'No Image'}")

    def show_errors(self, field_errors: dict[str, str]) -> None:
        """
        Display per-field validation messages.

        Parameters
        ----------
        field_errors:
            Mapping of field name to message. Fields not present are cleared.
        """
        for name, label in self._errors.items():
            message = field_errors.get(name, "")
            label.setText(message)
            label.setVisible(bool(message))

    def _on_save(self) -> None:
        errors = validate_record(self._draft)
        self.show_errors(errors)
        if errors:
            return
        self._result = self._draft
        self.accept()
