"""
Utility functions for the Blueprint Flooring Estimator
Includes deployment detection and user data directory management
"""

import os
import sys


APPLICATION_NAME = "Blueprint Flooring Estimator"
APPLICATION_VERSION = "1.0.0"


def is_bundled_executable():
    """
    Detect if running as a bundled executable (PyInstaller)
    Returns True if bundled, False if running from source
    """
    return getattr(sys, 'frozen', False) and hasattr(sys, '_MEIPASS')


def get_user_data_directory():
    """
    Get the user data directory for the estimator database

    BFE_DATA_DIR overrides the default location.

    Returns:
        str: Absolute path to user data directory
    """
    override = os.environ.get("BFE_DATA_DIR")
    if override:
        return os.path.expanduser(override)
    return os.path.expanduser("~/Documents/BlueprintEstimator")


def ensure_user_data_directory():
    """
    Ensure the user data directory exists

    Returns:
        str: Absolute path to created user data directory
    """
    user_dir = get_user_data_directory()
    os.makedirs(user_dir, exist_ok=True)
    return user_dir


def get_application_title():
    """Application title with version"""
    return f"{APPLICATION_NAME} v{APPLICATION_VERSION}"


def get_about_text():
    """
    Get formatted about text for the application

    Returns:
        str: Formatted about text
    """
    return f"""{APPLICATION_NAME}
Version: {APPLICATION_VERSION}

Upload a floor plan, trace rooms as rectangles, circles, triangles
or custom shapes, enter their real dimensions and get square footage
per area and in total.
Built with PySide6 and Python."""


def log_environment_info():
    """
    Log environment information for debugging
    Useful for troubleshooting deployment issues
    """
    from utils.debug_logger import debug_logger

    debug_logger.info("Environment", "Runtime", {
        'bundled': is_bundled_executable(),
        'python': sys.executable,
        'user_data_dir': get_user_data_directory(),
        'version': APPLICATION_VERSION,
    })
