"""
Projects Panel - save, load and delete named estimates
"""

from datetime import datetime

from PySide6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
                               QPushButton, QListWidget, QListWidgetItem, QMessageBox)
from PySide6.QtCore import Qt, Signal

from models.key_value_store import StorageError
from models.selection_ledger import InvalidProjectStateError
from utils.debug_logger import debug_logger


class ProjectsPanel(QWidget):
    """Project list for the signed-in user, or the shared list without an account"""

    status_message = Signal(str)

    def __init__(self, controller, project_store, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.project_store = project_store
        self.owner = None
        self.init_ui()
        self.refresh()

    def init_ui(self):
        """Initialize the user interface"""
        layout = QVBoxLayout()

        self.owner_label = QLabel()
        layout.addWidget(self.owner_label)

        save_layout = QHBoxLayout()
        self.name_edit = QLineEdit()
        self.name_edit.setPlaceholderText("Project name")
        self.name_edit.returnPressed.connect(self.save_project)
        save_layout.addWidget(self.name_edit)
        self.save_btn = QPushButton("Save Project")
        self.save_btn.clicked.connect(self.save_project)
        save_layout.addWidget(self.save_btn)
        layout.addLayout(save_layout)

        self.project_list = QListWidget()
        self.project_list.itemDoubleClicked.connect(lambda _item: self.load_selected())
        layout.addWidget(self.project_list)

        button_layout = QHBoxLayout()
        self.load_btn = QPushButton("Load")
        self.load_btn.clicked.connect(self.load_selected)
        button_layout.addWidget(self.load_btn)
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(self.delete_selected)
        button_layout.addWidget(self.delete_btn)
        layout.addLayout(button_layout)

        self.setLayout(layout)

    def set_owner(self, owner):
        self.owner = owner
        self.refresh()

    def refresh(self):
        self.owner_label.setText(f"Projects for {self.owner}" if self.owner
                                 else "Projects on this computer (not signed in)")
        self.project_list.clear()
        projects = self.project_store.list_projects(self.owner)
        if not projects:
            item = QListWidgetItem("No saved projects yet. Save one!")
            item.setFlags(Qt.NoItemFlags)
            self.project_list.addItem(item)
        for project in projects:
            item = QListWidgetItem(_project_summary(project))
            item.setData(Qt.UserRole, project.get('id'))
            self.project_list.addItem(item)
        has_projects = bool(projects)
        self.load_btn.setEnabled(has_projects)
        self.delete_btn.setEnabled(has_projects)

    def _selected_project(self):
        item = self.project_list.currentItem()
        if item is None or item.data(Qt.UserRole) is None:
            return None
        return self.project_store.get_project(self.owner, item.data(Qt.UserRole))

    def save_project(self):
        name = self.name_edit.text().strip()
        if not name:
            QMessageBox.warning(self, "Save Project", "Please enter a project name.")
            self.name_edit.setFocus()
            return
        state, warning = self.controller.export_state()
        try:
            self.project_store.save_project(self.owner, name, state)
        except StorageError as e:
            QMessageBox.critical(self, "Save Project", f"The project was not saved.\n{e}")
            return
        if warning:
            QMessageBox.information(self, "Save Project", warning)
        self.name_edit.clear()
        self.refresh()
        self.status_message.emit(f'Saved project "{name}".')

    def load_selected(self):
        project = self._selected_project()
        if project is None:
            return
        try:
            self.controller.import_state(project.get('state'))
        except InvalidProjectStateError as e:
            QMessageBox.warning(self, "Load Project",
                                f'Project "{project.get("name")}" could not be loaded.\n{e}')
            return
        self.status_message.emit(f'Loaded project "{project.get("name")}".')

    def delete_selected(self):
        project = self._selected_project()
        if project is None:
            return
        reply = QMessageBox.question(self, "Delete Project",
                                     f'Delete "{project.get("name")}"? This can\'t be undone.')
        if reply != QMessageBox.Yes:
            return
        try:
            self.project_store.delete_project(self.owner, project.get('id'))
        except StorageError as e:
            QMessageBox.critical(self, "Delete Project", str(e))
            return
        self.refresh()
        self.status_message.emit(f'Deleted project "{project.get("name")}".')


def _project_summary(project):
    text = f"{project.get('name') or 'Untitled'} • {project.get('totalSqFt', 0)} sq ft • {project.get('count', 0)} areas"
    updated = project.get('updatedAt')
    if isinstance(updated, (int, float)) and not isinstance(updated, bool) and updated > 0:
        try:
            text += f" • {datetime.fromtimestamp(updated / 1000).strftime('%Y-%m-%d %H:%M')}"
        except (OverflowError, OSError, ValueError) as e:
            debug_logger.debug("Projects", f"Unreadable saved time {updated!r}: {e}")
    return text
