"""
SaveMarkupDialog - Name and describe a named markup save
"""

from typing import Optional

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QLabel, QLineEdit, QPlainTextEdit,
    QFormLayout, QCheckBox, QDialogButtonBox
)


class SaveMarkupDialog(QDialog):
    """
    Dialog collecting the name, description and sharing flag of a named save.

    Save stays disabled while the name is blank. The caller still validates
    the name before writing.

    Usage:
        dialog = SaveMarkupDialog(parent)
        if dialog.exec():
            name, description, shared = dialog.get_values()
    """

    def __init__(self, parent=None, default_name: str = ""):
        super().__init__(parent)

        self.setWindowTitle("Save Markup As")
        self.setMinimumWidth(400)
        self.setModal(True)

        self._create_ui(default_name)

    def _create_ui(self, default_name: str):
        """Create dialog UI"""
        layout = QVBoxLayout(self)
        layout.setSpacing(12)

        label = QLabel("Save the current markup as a named version:")
        layout.addWidget(label)

        form = QFormLayout()

        self._name_input = QLineEdit(default_name)
        self._name_input.setPlaceholderText("e.g. Electrical rough-in")
        self._name_input.textChanged.connect(self._update_save_enabled)
        form.addRow("Name:", self._name_input)

        self._description_input = QPlainTextEdit()
        self._description_input.setPlaceholderText("Optional")
        self._description_input.setFixedHeight(70)
        form.addRow("Description:", self._description_input)

        self._shared_check = QCheckBox("Share with the crew")
        form.addRow("", self._shared_check)

        layout.addLayout(form)

        self._button_box = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        self._button_box.accepted.connect(self.accept)
        self._button_box.rejected.connect(self.reject)
        layout.addWidget(self._button_box)

        self._update_save_enabled()
        self._name_input.setFocus()

    def _update_save_enabled(self, *_):
        save_btn = self._button_box.button(QDialogButtonBox.StandardButton.Save)
        save_btn.setEnabled(bool(self._name_input.text().strip()))

    @property
    def name(self) -> str:
        return self._name_input.text().strip()

    @property
    def description(self) -> Optional[str]:
        text = self._description_input.toPlainText().strip()
        return text or None

    @property
    def is_shared(self) -> bool:
        return self._shared_check.isChecked()

    def is_save_enabled(self) -> bool:
        return self._button_box.button(QDialogButtonBox.StandardButton.Save).isEnabled()

    def get_values(self):
        """Get (name, description, is_shared)"""
        return self.name, self.description, self.is_shared


__all__ = ['SaveMarkupDialog']
