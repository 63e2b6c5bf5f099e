"""
NamedSavesDialog - Pick a named markup save to load
"""

from typing import List, Optional

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QTreeWidget, QTreeWidgetItem,
    QDialogButtonBox, QHeaderView
)
from PyQt6.QtCore import Qt, pyqtSignal

from ...services.records import NamedMarkupSave


class NamedSavesDialog(QDialog):
    """
    Lists the named saves of a blueprint, most recently updated first.

    Usage:
        dialog = NamedSavesDialog(saves, parent)
        dialog.save_selected.connect(on_load)
        dialog.exec()
    """

    save_selected = pyqtSignal(str)  # save_id

    COLUMNS = ["Name", "Updated", "Shared", "Description"]

    def __init__(self, saves: List[NamedMarkupSave], parent=None):
        super().__init__(parent)

        self._saves = sorted(saves, key=lambda s: s.updated_at, reverse=True)

        self.setWindowTitle("Saved Markups")
        self.setMinimumSize(520, 320)
        self.setModal(True)

        self._create_ui()

    def _create_ui(self):
        """Create dialog UI"""
        layout = QVBoxLayout(self)

        if not self._saves:
            layout.addWidget(QLabel("No saved markups for this blueprint yet."))

        self._tree = QTreeWidget()
        self._tree.setColumnCount(len(self.COLUMNS))
        self._tree.setHeaderLabels(self.COLUMNS)
        self._tree.setRootIsDecorated(False)
        self._tree.header().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self._tree.itemDoubleClicked.connect(lambda item, col: self._on_accept())
        self._tree.currentItemChanged.connect(self._update_load_enabled)

        for save in self._saves:
            item = QTreeWidgetItem([
                save.name,
                save.updated_at.astimezone().strftime("%Y-%m-%d %H:%M"),
                "Yes" if save.is_shared else "",
                save.description or "",
            ])
            item.setData(0, Qt.ItemDataRole.UserRole, save.id)
            self._tree.addTopLevelItem(item)

        layout.addWidget(self._tree)

        self._button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Open | QDialogButtonBox.StandardButton.Cancel
        )
        self._button_box.accepted.connect(self._on_accept)
        self._button_box.rejected.connect(self.reject)
        layout.addWidget(self._button_box)

        if self._saves:
            self._tree.setCurrentItem(self._tree.topLevelItem(0))
        self._update_load_enabled()

    def _update_load_enabled(self, *_):
        self._button_box.button(QDialogButtonBox.StandardButton.Open).setEnabled(
            self.selected_save_id() is not None
        )

    def selected_save_id(self) -> Optional[str]:
        item = self._tree.currentItem()
        if item is None:
            return None
        return item.data(0, Qt.ItemDataRole.UserRole)

    def _on_accept(self):
        save_id = self.selected_save_id()
        if save_id is None:
            return
        self.save_selected.emit(save_id)
        self.accept()


__all__ = ['NamedSavesDialog']
