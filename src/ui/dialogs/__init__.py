"""
UI Dialogs package
"""

from .measurement_dialog import MeasurementDialog
from .account_dialog import AccountDialog

__all__ = [
	'MeasurementDialog',
	'AccountDialog'
]
