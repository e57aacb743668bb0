"""
Estimator Window - main window: blueprint canvas, saved areas, projects and chat
"""

import os

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel,
                               QPushButton, QListWidget, QListWidgetItem, QSplitter,
                               QTabWidget, QToolBar, QMessageBox, QFileDialog, QDialog,
                               QInputDialog)
from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QActionGroup, QKeySequence

from chat.relay_client import ChatRelayClient
from drawing.blueprint_canvas import BlueprintCanvas
from drawing.blueprint_image import BlueprintImageError, image_file_filter
from drawing.drawing_tools import ToolType, ModeChanged
from drawing.estimator_controller import EstimatorController
from drawing.scale_manager import ScaleManager
from drawing.shapes import shape_type_label
from models.project_store import ProjectStore
from models.user_accounts import UserAccounts
from ui.chat_panel import ChatPanel
from ui.dialogs.account_dialog import AccountDialog
from ui.dialogs.measurement_dialog import MeasurementDialog
from ui.projects_panel import ProjectsPanel
from utils import get_application_title, get_about_text
from utils.settings_manager import get_settings_manager


MODE_ACTIONS = [
    (ToolType.RECTANGLE, "▭ Rectangle"),
    (ToolType.CIRCLE, "◯ Circle"),
    (ToolType.TRIANGLE, "△ Triangle"),
    (ToolType.POLYGON, "⬠ Custom Shape"),
]


class EstimatorWindow(QMainWindow):
    """Main estimator window"""

    def __init__(self, store, controller=None, chat_client=None):
        super().__init__()
        self.settings = get_settings_manager()
        self.controller = controller or EstimatorController(require_blueprint=True)
        self.accounts = UserAccounts(store)
        self.project_store = ProjectStore(store)
        self.chat_client = chat_client or ChatRelayClient(self.settings.get_chat_relay_url())
        self._prompting = False

        self.init_ui()
        self.setup_connections()
        self.set_account(self.accounts.current_user())
        self.on_ledger_changed(self.controller.ledger)
        self.on_controller_changed(self.controller)

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle(get_application_title())
        self.setGeometry(100, 100, 1400, 900)

        self.create_menu_bar()
        self.create_toolbar()

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout()

        splitter = QSplitter(Qt.Horizontal)
        self.canvas = BlueprintCanvas(self.controller)
        splitter.addWidget(self.canvas)
        splitter.addWidget(self.create_side_panel())
        splitter.setSizes([1000, 400])

        main_layout.addWidget(splitter)
        central_widget.setLayout(main_layout)

        self.status_bar = self.statusBar()
        self.account_label = QLabel()
        self.status_bar.addPermanentWidget(self.account_label)

    def create_menu_bar(self):
        """Create the menu bar"""
        menubar = self.menuBar()

        file_menu = menubar.addMenu('File')
        open_action = file_menu.addAction('Open Blueprint…', self.open_blueprint)
        open_action.setShortcut(QKeySequence.Open)
        file_menu.addSeparator()
        file_menu.addAction('Close', self.close)

        edit_menu = menubar.addMenu('Edit')
        self.undo_action = edit_menu.addAction('Undo Last Area', self.undo_last)
        self.undo_action.setShortcut(QKeySequence.Undo)
        self.clear_action = edit_menu.addAction('Clear All Areas', self.clear_all)

        account_menu = menubar.addMenu('Account')
        self.sign_in_action = account_menu.addAction('Sign In…', self.sign_in)
        self.sign_out_action = account_menu.addAction('Sign Out', self.sign_out)

        settings_menu = menubar.addMenu('Settings')
        settings_menu.addAction('Chat Relay URL…', self.edit_chat_relay_url)
        settings_menu.addAction('Database Location…', self.edit_database_location)

        help_menu = menubar.addMenu('Help')
        help_menu.addAction('About', self.show_about)

    def create_toolbar(self):
        """Create the main toolbar"""
        toolbar = QToolBar()
        self.addToolBar(toolbar)

        toolbar.addAction('📂 Open Blueprint', self.open_blueprint)
        toolbar.addSeparator()

        self.mode_group = QActionGroup(self)
        self.mode_group.setExclusive(True)
        self.mode_actions = {}
        for tool_type, text in MODE_ACTIONS:
            action = QAction(text, self)
            action.setCheckable(True)
            action.triggered.connect(lambda _checked=False, t=tool_type: self.set_mode(t))
            self.mode_group.addAction(action)
            toolbar.addAction(action)
            self.mode_actions[tool_type] = action
        self.mode_actions[self.controller.mode].setChecked(True)

        toolbar.addSeparator()
        toolbar.addAction(self.undo_action)
        toolbar.addAction(self.clear_action)

    def create_side_panel(self):
        """Saved areas, projects and chat tabs"""
        tabs = QTabWidget()

        areas = QWidget()
        areas_layout = QVBoxLayout()
        self.total_label = QLabel()
        self.total_label.setStyleSheet("font-size: 18px; font-weight: bold;")
        areas_layout.addWidget(self.total_label)
        self.count_label = QLabel()
        areas_layout.addWidget(self.count_label)

        self.areas_list = QListWidget()
        self.areas_list.setWordWrap(True)
        areas_layout.addWidget(self.areas_list)

        self.remove_btn = QPushButton("Remove Selected")
        self.remove_btn.clicked.connect(self.remove_selected_area)
        areas_layout.addWidget(self.remove_btn)
        areas.setLayout(areas_layout)
        tabs.addTab(areas, "Areas")

        self.projects_panel = ProjectsPanel(self.controller, self.project_store)
        tabs.addTab(self.projects_panel, "Projects")

        self.chat_panel = ChatPanel(self.chat_client, self.controller.snapshot)
        tabs.addTab(self.chat_panel, "Assistant")
        return tabs

    def setup_connections(self):
        self.controller.add_listener(self.on_controller_changed)
        self.controller.ledger.add_listener(self.on_ledger_changed)
        self.projects_panel.status_message.connect(self.status_bar.showMessage)

    # ---------------------- State updates ----------------------

    def on_controller_changed(self, controller):
        self.status_bar.showMessage(controller.status)
        action = self.mode_actions.get(controller.mode)
        if action is not None and not action.isChecked():
            action.setChecked(True)
        if controller.pending is not None and not self._prompting:
            # Let the mouse event that finished the shape return first
            QTimer.singleShot(0, self.prompt_pending)

    def on_ledger_changed(self, ledger):
        self.total_label.setText(f"Total: {ScaleManager.format_area(ledger.total())}")
        self.count_label.setText(f"Saved areas: {ledger.count}")
        self.areas_list.clear()
        if not ledger.count:
            item = QListWidgetItem("No saved selections yet.")
            item.setFlags(Qt.NoItemFlags)
            self.areas_list.addItem(item)
        for selection in ledger.selections:
            item = QListWidgetItem(
                f"{selection.label} ({shape_type_label(selection.type)}): "
                f"{ScaleManager.format_area(selection.area_sq_ft)}\n{selection.details}"
            )
            item.setData(Qt.UserRole, selection.id)
            self.areas_list.addItem(item)
        has_any = ledger.count > 0
        self.undo_action.setEnabled(has_any)
        self.clear_action.setEnabled(has_any)
        self.remove_btn.setEnabled(has_any)

    def prompt_pending(self):
        """Show measurement dialogs until the controller stops asking"""
        if self._prompting:
            return
        self._prompting = True
        try:
            while self.controller.pending is not None:
                dialog = MeasurementDialog(self.controller.pending, self)
                if dialog.exec() == QDialog.Accepted:
                    self.controller.resolve(dialog.values())
                else:
                    self.controller.reject()
        finally:
            self._prompting = False
        self.canvas.setFocus()

    # ---------------------- Actions ----------------------

    def set_mode(self, tool_type):
        self.controller.handle_event(ModeChanged(tool_type))
        self.canvas.setFocus()

    def open_blueprint(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Blueprint", self.settings.get_last_image_directory(), image_file_filter()
        )
        if not path:
            return
        if self.controller.ledger.count:
            reply = QMessageBox.question(
                self, "Open Blueprint",
                "Opening a new image clears your saved selections. Continue?"
            )
            if reply != QMessageBox.Yes:
                return
        try:
            self.controller.load_blueprint_file(path)
        except BlueprintImageError as e:
            QMessageBox.warning(self, "Open Blueprint", str(e))
            return
        self.settings.set_last_image_directory(os.path.dirname(path))
        self.canvas.setFocus()

    def undo_last(self):
        self.controller.undo()

    def clear_all(self):
        reply = QMessageBox.question(self, "Clear All Areas", "Remove every saved selection?")
        if reply == QMessageBox.Yes:
            self.controller.clear()

    def remove_selected_area(self):
        item = self.areas_list.currentItem()
        if item is None or item.data(Qt.UserRole) is None:
            return
        self.controller.remove_selection(item.data(Qt.UserRole))

    def set_account(self, username):
        self.projects_panel.set_owner(username)
        self.account_label.setText(f"Signed in as {username}" if username else "Not signed in")
        self.sign_in_action.setEnabled(username is None)
        self.sign_out_action.setEnabled(username is not None)

    def sign_in(self):
        dialog = AccountDialog(self.accounts, self)
        if dialog.exec() == QDialog.Accepted:
            self.set_account(dialog.username)
            self.status_bar.showMessage(f"Signed in as {dialog.username}.")

    def sign_out(self):
        self.accounts.logout()
        self.set_account(None)
        self.status_bar.showMessage("Logged out.")

    def edit_chat_relay_url(self):
        url, ok = QInputDialog.getText(self, "Chat Relay URL", "Relay endpoint:",
                                       text=self.settings.get_chat_relay_url())
        if ok:
            self.settings.set_chat_relay_url(url.strip())
            self.chat_client.url = self.settings.get_chat_relay_url()

    def edit_database_location(self):
        path, _ = QFileDialog.getSaveFileName(self, "Database Location",
                                              self.settings.get_database_path() or "",
                                              "SQLite database (*.db)")
        if path:
            self.settings.set_database_path(path)
            QMessageBox.information(self, "Database Location",
                                    "The new location will be used the next time the app starts.")

    def show_about(self):
        QMessageBox.about(self, "About", get_about_text())
