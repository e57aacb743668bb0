"""
Debug logging for the estimator
One switchable logger shared by capture, area, storage and chat code
"""

import os
import logging
from typing import Any, Dict, Optional
import json


_TRUTHY = {"1", "true", "yes", "on"}


class EstimatorDebugLogger:
    """Process-wide logger; silent unless BFE_DEBUG is set"""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if EstimatorDebugLogger._initialized:
            return
        self.configure()
        EstimatorDebugLogger._initialized = True

    def configure(self):
        """(Re)read BFE_DEBUG, BFE_DEBUG_LEVEL and BFE_DEBUG_FILE"""
        self.debug_enabled = os.environ.get("BFE_DEBUG", "").strip().lower() in _TRUTHY
        level_name = os.environ.get("BFE_DEBUG_LEVEL", "INFO").upper()

        self.logger = logging.getLogger('bfe_debug')
        self.logger.setLevel(getattr(logging, level_name, logging.INFO))
        self.logger.propagate = False
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()

        if not self.debug_enabled:
            return

        formatter = logging.Formatter(
            '%(asctime)s [BFE-%(levelname)s] %(component)s: %(message)s',
            datefmt='%H:%M:%S'
        )
        handlers = [logging.StreamHandler()]
        log_file = os.environ.get("BFE_DEBUG_FILE")
        if log_file:
            handlers.append(logging.FileHandler(log_file))
        for handler in handlers:
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def _emit(self, level: int, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        if not self.debug_enabled:
            return
        if data:
            message = f"{message} {self._format_data(data)}"
        self.logger.log(level, message, extra={'component': component})

    def debug(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        self._emit(logging.DEBUG, component, message, data)

    def info(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        self._emit(logging.INFO, component, message, data)

    def warning(self, component: str, message: str, data: Optional[Dict[str, Any]] = None):
        self._emit(logging.WARNING, component, message, data)

    def error(self, component: str, message: str, error: Optional[Exception] = None,
              data: Optional[Dict[str, Any]] = None):
        """Error with the exception text appended"""
        if error is not None:
            message = f"{message} Error: {error}"
        self._emit(logging.ERROR, component, message, data)

    @staticmethod
    def _format_data(data: Dict[str, Any]) -> str:
        """Compact JSON; lengths and areas at two decimals, pixels at one"""
        rounded = {}
        for key, value in data.items():
            is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
            if is_number and key.endswith(('_sq_ft', '_ft')):
                rounded[key] = f"{float(value):.2f}"
            elif is_number and key.endswith('_px'):
                rounded[key] = f"{float(value):.1f}"
            else:
                rounded[key] = value
        return json.dumps(rounded, separators=(',', ':'), default=str)

    def log_transition(self, component: str, from_state: str, to_state: str, reason: Optional[str] = None):
        """Capture state machine moved from one state to another"""
        data = {'from': from_state, 'to': to_state}
        if reason:
            data['reason'] = reason
        self.debug(component, "Transition", data)

    def log_validation_result(self, component: str, field: str, raw_value: Any, accepted: bool,
                              error: Optional[str] = None):
        """Outcome of checking a typed measurement"""
        data = {'field': field, 'raw': raw_value, 'accepted': accepted}
        if error:
            data['error'] = error
        if accepted:
            self.debug(component, "Value accepted", data)
        else:
            self.warning(component, "Value rejected", data)


debug_logger = EstimatorDebugLogger()
