#!/usr/bin/env python3
"""
Blueprint Flooring Estimator - Main Application Entry Point
Desktop application for measuring floor areas on blueprint images
"""

import sys
import os
from PySide6.QtWidgets import QApplication, QStyleFactory, QMessageBox

# Add src directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from models import initialize_database, close_database, KeyValueStore
from ui.estimator_window import EstimatorWindow
from utils.debug_logger import debug_logger
from utils.general_utils import APPLICATION_NAME, APPLICATION_VERSION
from utils.settings_manager import SettingsManager


class FlooringEstimatorApp(QApplication):
    """Main application class"""

    def __init__(self, argv):
        super().__init__(argv)
        self.setApplicationName(APPLICATION_NAME)
        self.setApplicationVersion(APPLICATION_VERSION)
        self.setOrganizationName(SettingsManager.ORGANIZATION)

        # Set application style
        self.setStyle(QStyleFactory.create('Fusion'))

        self.main_window = None

    def start(self):
        """Start the application"""
        try:
            db_path = initialize_database()
        except Exception as e:
            QMessageBox.critical(None, "Database Error", f"Failed to initialize database:\n{e}")
            return 1
        debug_logger.info("App", f"Database ready at {db_path}")

        self.main_window = EstimatorWindow(KeyValueStore())
        self.main_window.show()
        try:
            return self.exec()
        finally:
            close_database()


def main():
    """Application entry point"""
    app = FlooringEstimatorApp(sys.argv)
    return app.start()


if __name__ == '__main__':
    sys.exit(main())
