"""
Utils package - Utility modules for the Blueprint Flooring Estimator
"""

from .general_utils import (
    is_bundled_executable,
    get_user_data_directory,
    ensure_user_data_directory,
    get_application_title,
    get_about_text,
    log_environment_info
)

__all__ = [
    'is_bundled_executable',
    'get_user_data_directory',
    'ensure_user_data_directory',
    'get_application_title',
    'get_about_text',
    'log_environment_info'
]
