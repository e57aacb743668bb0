"""
Account Dialog - register or sign in to a local account
"""

from PySide6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
                               QPushButton, QFormLayout, QMessageBox)

from models.key_value_store import StorageError
from models.user_accounts import AuthenticationError


class AccountDialog(QDialog):
    """Username/password form with Register and Log in buttons"""

    def __init__(self, accounts, parent=None):
        super().__init__(parent)
        self.accounts = accounts
        self.username = None
        self.init_ui()

    def init_ui(self):
        """Initialize the user interface"""
        self.setWindowTitle("Sign In")
        self.setModal(True)
        self.setMinimumWidth(340)

        layout = QVBoxLayout()

        note = QLabel("Accounts are stored on this computer only.")
        note.setStyleSheet("color: gray;")
        layout.addWidget(note)

        form = QFormLayout()
        self.username_edit = QLineEdit()
        form.addRow("Username:", self.username_edit)
        self.password_edit = QLineEdit()
        self.password_edit.setEchoMode(QLineEdit.Password)
        form.addRow("Password:", self.password_edit)
        layout.addLayout(form)

        button_layout = QHBoxLayout()
        self.register_btn = QPushButton("Register")
        self.register_btn.clicked.connect(self.register)
        button_layout.addWidget(self.register_btn)

        self.login_btn = QPushButton("Log in")
        self.login_btn.setDefault(True)
        self.login_btn.clicked.connect(self.login)
        button_layout.addWidget(self.login_btn)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        button_layout.addWidget(cancel_btn)
        layout.addLayout(button_layout)

        self.setLayout(layout)

    def register(self):
        self._submit(self.accounts.register)

    def login(self):
        self._submit(self.accounts.login)

    def _submit(self, action):
        try:
            self.username = action(self.username_edit.text(), self.password_edit.text())
        except AuthenticationError as e:
            QMessageBox.warning(self, "Sign In", str(e))
            self.password_edit.setFocus()
            return
        except StorageError as e:
            QMessageBox.critical(self, "Sign In", str(e))
            return
        self.accept()
