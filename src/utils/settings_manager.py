"""
Settings Manager - Persistent preferences (QSettings) for the estimator
"""

import os
from PySide6.QtCore import QSettings


DEFAULT_CHAT_RELAY_URL = "http://127.0.0.1:8000/api/chat"


class SettingsManager:
    """Reads and writes estimator preferences through QSettings"""

    ORGANIZATION = "Blueprint Tools"
    APPLICATION = "Blueprint Flooring Estimator"

    KEY_STORE_PATH = "storage/database_file"
    KEY_CHAT_RELAY_URL = "assistant/relay_url"
    KEY_LAST_IMAGE_DIR = "blueprint/last_directory"

    def __init__(self, settings=None):
        self.settings = settings or QSettings(self.ORGANIZATION, self.APPLICATION)

    def _read(self, key, default=None):
        value = self.settings.value(key, default, type=str)
        return value or default

    def _write(self, key, value):
        """Store value under key; an empty value removes the key"""
        if value:
            self.settings.setValue(key, value)
        else:
            self.settings.remove(key)
        self.settings.sync()

    def get_database_path(self):
        """
        Database file chosen in Settings > Database Location

        Returns:
            str or None: The chosen file, or None when unset or its folder is gone
        """
        path = self._read(self.KEY_STORE_PATH)
        if path and os.path.isdir(os.path.dirname(path)):
            return path
        return None

    def set_database_path(self, db_path):
        self._write(self.KEY_STORE_PATH, db_path)

    def get_chat_relay_url(self):
        """
        Chat relay endpoint, environment first, then settings, then the local default

        Returns:
            str: Absolute URL of the relay's chat endpoint
        """
        return os.environ.get("BFE_CHAT_RELAY_URL") or self._read(self.KEY_CHAT_RELAY_URL,
                                                                   DEFAULT_CHAT_RELAY_URL)

    def set_chat_relay_url(self, url):
        """An empty value restores the default"""
        self._write(self.KEY_CHAT_RELAY_URL, url)

    def get_last_image_directory(self):
        """Folder the last blueprint was opened from"""
        return self._read(self.KEY_LAST_IMAGE_DIR, os.path.expanduser("~"))

    def set_last_image_directory(self, directory):
        self._write(self.KEY_LAST_IMAGE_DIR, directory)


_settings_manager = None


def get_settings_manager():
    """Shared SettingsManager, created on first use"""
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
    return _settings_manager
