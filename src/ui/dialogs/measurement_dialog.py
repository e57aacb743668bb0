"""
Measurement Dialog - asks for the real lengths behind a drawn shape
"""

from PySide6.QtWidgets import (QDialog, QVBoxLayout, QLabel, QLineEdit, QComboBox,
                               QFormLayout, QDialogButtonBox, QHBoxLayout, QWidget)
from PySide6.QtCore import Qt

from drawing.measurement_requests import FieldKind


class MeasurementDialog(QDialog):
    """Modal form built from a MeasurementRequest"""

    def __init__(self, request, parent=None):
        super().__init__(parent)
        self.request = request
        self.inputs = {}
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle(self.request.title)
        self.setModal(True)
        self.setMinimumWidth(380)

        layout = QVBoxLayout()

        if self.request.error:
            error_label = QLabel(self.request.error)
            error_label.setWordWrap(True)
            error_label.setStyleSheet("color: #b00020; font-weight: bold;")
            layout.addWidget(error_label)

        form = QFormLayout()
        for field in self.request.fields:
            widget = self._create_input(field)
            self.inputs[field.name] = widget
            if field.kind in (FieldKind.LENGTH, FieldKind.AREA):
                row = QWidget()
                row_layout = QHBoxLayout(row)
                row_layout.setContentsMargins(0, 0, 0, 0)
                row_layout.addWidget(widget)
                row_layout.addWidget(QLabel(field.units))
                form.addRow(field.prompt, row)
            else:
                form.addRow(field.prompt, widget)
        layout.addLayout(form)

        if any(f.kind == FieldKind.LENGTH for f in self.request.fields):
            hint = QLabel("Feet, or feet and inches like 12' 6\"")
            hint.setStyleSheet("color: gray;")
            layout.addWidget(hint)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

        self.setLayout(layout)

        first = next(iter(self.inputs.values()), None)
        if isinstance(first, QLineEdit):
            first.selectAll()
            first.setFocus(Qt.OtherFocusReason)

    def _create_input(self, field):
        if field.kind == FieldKind.CHOICE:
            combo = QComboBox()
            for value, text in self.request.choices:
                combo.addItem(text, value)
            index = combo.findData(field.default)
            if index >= 0:
                combo.setCurrentIndex(index)
            return combo
        edit = QLineEdit()
        if field.default is not None:
            edit.setText(str(field.default))
        return edit

    def values(self):
        """Raw answers keyed by field name"""
        values = {}
        for name, widget in self.inputs.items():
            if isinstance(widget, QComboBox):
                values[name] = widget.currentData()
            else:
                values[name] = widget.text()
        return values
