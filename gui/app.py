"""
Profilebook GUI app.

Single window backed by the engine RecordStore: the selected profile on top,
the record list below, and Create / Edit / Delete actions.
"""

from __future__ import annotations

import sys
from pathlib import Path

from PySide6.QtCore import Qt, QUrl
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from gui.adapters.record_store_adapter import RecordStoreAdapter, StoreSnapshot
from gui.dialogs.record_editor_dialog import RecordEditorDialog
from gui.image_picker import QtImagePicker
from profile_engine.data_models import ProfileRecord, builtin_default_record
from profile_engine.init_store import init_store
from profile_engine.logging_setup import setup_logging
from profile_engine.settings import load_settings

_PICTURE_SIZE = 120

_BUTTON_STYLE = "background-color: blue; color: white; padding: 10px; border-radius: 5px;"
_DELETE_STYLE = "background-color: tomato; color: white; padding: 10px; border-radius: 5px;"


class ProfilePanel(QWidget):
    """Read-only rendering of one profile record."""

    def __init__(self) -> None:
        super().__init__()
        root = QVBoxLayout(self)
        root.setContentsMargins(20, 20, 20, 20)

        self.picture = QLabel()
        self.picture.setFixedSize(_PICTURE_SIZE, _PICTURE_SIZE)
        self.picture.setAlignment(Qt.AlignCenter)
        root.addWidget(self.picture, 0, Qt.AlignHCenter)

        self.name = QLabel("")
        f = self.name.font()
        f.setPointSize(18)
        f.setBold(True)
        self.name.setFont(f)
        root.addWidget(self.name)

        self.dob = QLabel("")
        self.nationality = QLabel("")
        root.addWidget(self.dob)
        root.addWidget(self.nationality)

        bio_header = QLabel("Short Bio:")
        bf = bio_header.font()
        bf.setBold(True)
        bio_header.setFont(bf)
        root.addWidget(bio_header)

        self.bio = QLabel("")
        self.bio.setWordWrap(True)
        self.bio.setStyleSheet("color: #555;")
        root.addWidget(self.bio)

    def show_record(self, record: ProfileRecord) -> None:
        """Render ``record`` into the panel."""
        self.name.setText(record.display_name)
        self.dob.setText(f"Date of Birth: {record.date_of_birth}")
        self.nationality.setText(f"Nationality: {record.nationality}")
        self.bio.setText(record.short_bio)
        self._show_picture(record.picture)

    def _show_picture(self, uri: str | None) -> None:
        pixmap = QPixmap()
        if uri:
            url = QUrl(uri)
            if url.isLocalFile():
                pixmap.load(url.toLocalFile())

        if pixmap.isNull():
            # Remote URIs are not fetched; they render like a missing picture.
            self.picture.setPixmap(QPixmap())
            self.picture.setText("No Image")
            self.picture.setStyleSheet(
                f"background-color: #ccc; color: #fff; font-weight: bold; "
                f"border-radius: {_PICTURE_SIZE // 2}px;"
            )
            return

        self.picture.setStyleSheet("")
        self.picture.setPixmap(
            pixmap.scaled(_PICTURE_SIZE, _PICTURE_SIZE, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        )


class AppWindow(QWidget):
    """
    Main window for the profilebook GUI.

    Responsibilities
    ----------------
    - Render the selected record and the record list from store snapshots
    - Open the record editor for create and edit
    - Coordinate clean shutdown of the store worker
    """

    def __init__(self, data_root: Path | None = None) -> None:
        """
        Initialize the main window and start loading records.

        Parameters
        ----------
        data_root:
            Optional override for the data root.
        """
        super().__init__()
        self.setWindowTitle("Profilebook")
        self.resize(420, 720)

        self._snapshot = StoreSnapshot(records=(), selected=None, pending_write=False)
        self._picker = QtImagePicker(self)

        paths = init_store(data_root)
        settings = load_settings(data_root=paths.data_root)
        setup_logging(settings.log_level, log_file=paths.logs_root / "profilebook-gui.jsonl")

        root = QVBoxLayout(self)
        root.setContentsMargins(20, 20, 20, 20)
        self.setStyleSheet("background-color: #f5f5f5;")

        self.profile = ProfilePanel()
        root.addWidget(self.profile)

        self.stale_label = QLabel("Changes are shown but could not be saved; the saved copy may be stale.")
        self.stale_label.setWordWrap(True)
        self.stale_label.setStyleSheet("color: #a60; padding: 4px;")
        self.stale_label.setVisible(False)
        root.addWidget(self.stale_label)

        self.record_list = QListWidget()
        self.record_list.itemClicked.connect(self._on_item_clicked)
        root.addWidget(self.record_list, 1)

        self.btn_create = QPushButton("Create User")
        self.btn_edit = QPushButton("Edit User")
        self.btn_delete = QPushButton("Delete User")
        self.btn_create.setStyleSheet(_BUTTON_STYLE)
        self.btn_edit.setStyleSheet(_BUTTON_STYLE)
        self.btn_delete.setStyleSheet(_DELETE_STYLE)
        self.btn_create.clicked.connect(self._create_record)
        self.btn_edit.clicked.connect(self._edit_selected)
        self.btn_delete.clicked.connect(self._delete_selected)
        for btn in (self.btn_create, self.btn_edit, self.btn_delete):
            root.addWidget(btn)

        self._store = RecordStoreAdapter(paths=paths, settings=settings)
        self._store.state_changed.connect(self._on_state_changed)
        self._store.validation_failed.connect(self._on_validation_failed)
        self._store.not_saved.connect(self._on_not_saved)
        self._store.error.connect(self._on_store_error)
        self._store.request_initialize.emit()

    # ---------------- Store results ----------------

    def _on_state_changed(self, snapshot_obj: object) -> None:
        assert isinstance(snapshot_obj, StoreSnapshot)
        self._snapshot = snapshot_obj

        self.record_list.clear()
        for record in snapshot_obj.records:
            item = QListWidgetItem(record.display_name)
            item.setData(Qt.UserRole, record)
            self.record_list.addItem(item)
            if snapshot_obj.selected is not None and record.record_id == snapshot_obj.selected.record_id:
                self.record_list.setCurrentItem(item)

        if snapshot_obj.selected is not None:
            self.profile.show_record(snapshot_obj.selected)
        self.stale_label.setVisible(snapshot_obj.pending_write)
        self.btn_edit.setEnabled(bool(snapshot_obj.records))
        self.btn_delete.setEnabled(bool(snapshot_obj.records))

    def _on_validation_failed(self, errors_obj: object) -> None:
        assert isinstance(errors_obj, dict)
        QMessageBox.warning(self, "Invalid profile", "\n".join(errors_obj.values()))

    def _on_not_saved(self, message: str) -> None:
        QMessageBox.warning(self, "Not saved", message)

    def _on_store_error(self, message: str) -> None:
        QMessageBox.critical(self, "Record Store Error", message)

    # ---------------- Actions ----------------

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        record = item.data(Qt.UserRole)
        if isinstance(record, ProfileRecord):
            self._store.request_select.emit(record)

    def _create_record(self) -> None:
        dlg = RecordEditorDialog(builtin_default_record(), self._picker, self, title="Create User")
        if dlg.exec() != RecordEditorDialog.Accepted:
            return
        draft = dlg.result_value()
        if draft is not None:
            self._store.request_commit_create.emit(draft)

    def _edit_selected(self) -> None:
        target = self._snapshot.selected
        if target is None or not self._snapshot.records:
            return
        dlg = RecordEditorDialog(target, self._picker, self, title="Edit User")
        if dlg.exec() != RecordEditorDialog.Accepted:
            return
        draft = dlg.result_value()
        if draft is not None:
            self._store.request_commit_edit.emit(draft, target)

    def _delete_selected(self) -> None:
        self._store.request_delete_selected.emit()

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """
        Handle window close by shutting down the store worker.

        Parameters
        ----------
        event:
            Qt close event.
        """
        try:
            self._store.shutdown()
        finally:
            super().closeEvent(event)


def main() -> int:
    """
    Run the profilebook GUI application.

    Returns
    -------
    int
        Qt application exit code.
    """
    app = QApplication(sys.argv)
    w = AppWindow()
    w.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
