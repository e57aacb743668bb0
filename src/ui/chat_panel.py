"""
Chat Panel - ask the flooring assistant about the current estimate
"""

from PySide6.QtWidgets import (QWidget, QVBoxLayout, QHBoxLayout, QTextEdit, QLineEdit,
                               QPushButton, QLabel)
from PySide6.QtCore import QThread, Signal

from chat.prompts import GREETING
from chat.relay_client import ChatRelayError


class ChatThread(QThread):
    """Background thread for one relay round trip"""

    reply_ready = Signal(str)
    request_failed = Signal(str)

    def __init__(self, client, message, snapshot):
        super().__init__()
        self.client = client
        self.message = message
        self.snapshot = snapshot

    def run(self):
        try:
            self.reply_ready.emit(self.client.ask(self.message, self.snapshot))
        except ChatRelayError as e:
            self.request_failed.emit(str(e))


class ChatPanel(QWidget):
    """Conversation log, input line and send button"""

    def __init__(self, client, snapshot_provider, parent=None):
        super().__init__(parent)
        self.client = client
        self.snapshot_provider = snapshot_provider
        self.thread = None
        self.init_ui()
        self.add_message("Assistant", GREETING)

    def init_ui(self):
        """Initialize the user interface"""
        layout = QVBoxLayout()

        title = QLabel("Flooring Assistant")
        title.setStyleSheet("font-weight: bold;")
        layout.addWidget(title)

        self.log = QTextEdit()
        self.log.setReadOnly(True)
        layout.addWidget(self.log)

        input_layout = QHBoxLayout()
        self.input_edit = QLineEdit()
        self.input_edit.setPlaceholderText("e.g. Add 10% waste to my total")
        self.input_edit.returnPressed.connect(self.send_message)
        input_layout.addWidget(self.input_edit)

        self.send_btn = QPushButton("Send")
        self.send_btn.clicked.connect(self.send_message)
        input_layout.addWidget(self.send_btn)
        layout.addLayout(input_layout)

        self.setLayout(layout)

    def add_message(self, role, text):
        self.log.append(f"<b>{role}:</b> {_escape(text)}")

    def set_busy(self, busy):
        self.input_edit.setEnabled(not busy)
        self.send_btn.setEnabled(not busy)

    def send_message(self):
        text = self.input_edit.text().strip()
        if not text or self.thread is not None:
            return
        self.input_edit.clear()
        self.add_message("You", text)
        self.set_busy(True)

        self.thread = ChatThread(self.client, text, self.snapshot_provider())
        self.thread.reply_ready.connect(self.on_reply)
        self.thread.request_failed.connect(self.on_failure)
        self.thread.finished.connect(self.on_thread_finished)
        self.thread.start()

    def on_reply(self, reply):
        self.add_message("Assistant", reply)

    def on_failure(self, message):
        self.add_message("Assistant", f"Sorry, I couldn't reach the assistant.\n{message}")

    def on_thread_finished(self):
        self.thread.deleteLater()
        self.thread = None
        self.set_busy(False)
        self.input_edit.setFocus()


def _escape(text):
    return (str(text).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
            .replace("\n", "<br>"))
