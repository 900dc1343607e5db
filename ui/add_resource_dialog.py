from PyQt6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QPushButton,
                             QLabel, QLineEdit, QFormLayout, QFrame)

from resx.translation_prompt import (TranslationInput, TranslationPrompt, TranslationRequest,
                                     validate_translation_input)
from ui.app_style import AppStyle
from utils.logging_setup import get_logger
from utils.translations import I18N

_ = I18N._

logger = get_logger("add_resource_dialog")


class AddResourceDialog(QDialog):
    """Asks for the primary and secondary translation of a new resource key."""

    def __init__(self, request: TranslationRequest, parent=None):
        super().__init__(parent)
        self.request = request
        self.translation_input = None
        self.setWindowTitle(_("Add missing string resource"))
        self.setMinimumSize(450, 220)
        self.setup_ui()
        self.validate_input()

    def setup_ui(self):
        AppStyle.sync_theme_from_widget(self)
        colors = AppStyle.get_dialog_colors()
        layout = QVBoxLayout(self)

        info_frame = QFrame()
        info_frame.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)
        form_layout = QFormLayout(info_frame)

        key_label = QLabel(f"{self.request.base_name}.{self.request.key}")
        key_label.setStyleSheet(f"font-weight: bold; color: {colors['key']};")
        form_layout.addRow(_("Resource Key:"), key_label)

        self.primary_edit = QLineEdit()
        self.primary_edit.textChanged.connect(self.validate_input)
        form_layout.addRow(self.request.primary_label + ":", self.primary_edit)

        self.secondary_edit = QLineEdit()
        self.secondary_edit.textChanged.connect(self.validate_input)
        form_layout.addRow(self.request.secondary_label + ":", self.secondary_edit)

        layout.addWidget(info_frame)

        self.status_label = QLabel("")
        self.status_label.setStyleSheet(f"color: {colors['error']};")
        self.status_label.setWordWrap(True)
        layout.addWidget(self.status_label)

        button_layout = QHBoxLayout()
        button_layout.addStretch()
        self.ok_button = QPushButton(_("OK"))
        self.ok_button.setDefault(True)
        self.ok_button.clicked.connect(self.handle_ok)
        button_layout.addWidget(self.ok_button)
        cancel_button = QPushButton(_("Cancel"))
        cancel_button.clicked.connect(self.reject)
        button_layout.addWidget(cancel_button)
        layout.addLayout(button_layout)

        self.primary_edit.setFocus()

    def _current_input(self) -> TranslationInput:
        return TranslationInput(self.request.key, self.primary_edit.text(), self.secondary_edit.text()).normalized()

    def validate_input(self) -> bool:
        error = validate_translation_input(self.request.language_config, self._current_input())
        self.status_label.setText(error or "")
        self.ok_button.setEnabled(error is None)
        return error is None

    def handle_ok(self):
        if not self.validate_input():
            return
        self.translation_input = self._current_input()
        logger.debug(f"Collected translations for {self.request.base_name}.{self.request.key}")
        self.accept()


class QtTranslationPrompt(TranslationPrompt):
    """Shows AddResourceDialog modally on the GUI thread."""

    def __init__(self, parent=None):
        self.parent = parent

    def request_translations(self, request: TranslationRequest):
        dialog = AddResourceDialog(request, self.parent)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog.translation_input
