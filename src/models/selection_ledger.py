"""
Selection ledger - the ordered list of saved areas and the running total
"""

import copy
import math
import uuid
from dataclasses import dataclass, field

from drawing.shapes import shape_from_dict
from utils.debug_logger import debug_logger


PROJECT_FILE_VERSION = 1


class InvalidProjectStateError(ValueError):
    """Raised when a saved project cannot be loaded; the ledger is left untouched"""


@dataclass
class Selection:
    """One saved area"""
    shape: object
    measurement: dict
    area_sq_ft: float
    label: str
    details: str = ""
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def type(self):
        return self.shape.shape_type

    def to_dict(self):
        return {
            'id': self.id,
            'label': self.label,
            'type': self.type,
            'shape': self.shape.to_dict(),
            'measurement': copy.deepcopy(self.measurement),
            'area_sq_ft': float(self.area_sq_ft),
            'details': self.details,
        }

    @classmethod
    def from_dict(cls, data):
        """Decode a saved selection; raises ValueError for anything malformed"""
        if not isinstance(data, dict):
            raise ValueError("Selection must be an object")
        shape = shape_from_dict(data.get('shape'))
        try:
            area = float(data['area_sq_ft'])
        except (KeyError, TypeError, ValueError):
            raise ValueError("Selection has no usable area")
        if not math.isfinite(area) or area < 0:
            raise ValueError(f"Selection area {area!r} is not valid")
        measurement = data.get('measurement') or {}
        if not isinstance(measurement, dict):
            raise ValueError("Selection measurement must be an object")
        return cls(
            shape=shape,
            measurement=copy.deepcopy(measurement),
            area_sq_ft=area,
            label=str(data.get('label') or ""),
            details=str(data.get('details') or ""),
            id=str(data.get('id') or uuid.uuid4().hex),
        )


class SelectionLedger:
    """Ordered saved areas; the total is always derived, never stored"""

    def __init__(self):
        self._selections = []
        self._listeners = []

    # --- queries -------------------------------------------------------

    @property
    def count(self):
        return len(self._selections)

    @property
    def selections(self):
        return list(self._selections)

    def total(self):
        return sum(s.area_sq_ft for s in self._selections)

    def get(self, selection_id):
        for selection in self._selections:
            if selection.id == selection_id:
                return selection
        return None

    def default_label(self):
        return f"Area {self.count + 1}"

    # --- mutations -----------------------------------------------------

    def append(self, shape, measurement, area_sq_ft, label=None, details=""):
        label = (label or "").strip() or self.default_label()
        selection = Selection(
            shape=shape,
            measurement=copy.deepcopy(measurement),
            area_sq_ft=float(area_sq_ft),
            label=label,
            details=details,
        )
        self._selections.append(selection)
        debug_logger.info("Ledger", f"Saved '{label}'",
                          {'area_sq_ft': selection.area_sq_ft, 'total_sq_ft': self.total()})
        self._notify()
        return selection

    def undo(self):
        """Remove the most recent selection; returns it, or None when empty"""
        if not self._selections:
            return None
        selection = self._selections.pop()
        debug_logger.info("Ledger", f"Undo '{selection.label}'", {'total_sq_ft': self.total()})
        self._notify()
        return selection

    def remove_by_id(self, selection_id):
        for i, selection in enumerate(self._selections):
            if selection.id == selection_id:
                del self._selections[i]
                debug_logger.info("Ledger", f"Removed '{selection.label}'", {'total_sq_ft': self.total()})
                self._notify()
                return selection
        return None

    def clear(self):
        had_any = bool(self._selections)
        self._selections = []
        if had_any:
            debug_logger.info("Ledger", "Cleared all selections")
        self._notify()

    # --- snapshots and project files -----------------------------------

    def snapshot(self):
        """Read-only copy for display and the chat assistant; no geometry"""
        return copy.deepcopy({
            'totalSqFt': round(self.total(), 2),
            'selectionsCount': self.count,
            'selections': [
                {
                    'type': s.type,
                    'label': s.label,
                    'areaFt2': round(s.area_sq_ft, 2),
                    'measurement': s.measurement,
                    'details': s.details,
                }
                for s in self._selections
            ],
        })

    def export_state(self, mode, blueprint=None):
        """Full project file; blueprint is a data URL or None"""
        return {
            'version': PROJECT_FILE_VERSION,
            'mode': mode,
            'selections': [s.to_dict() for s in self._selections],
            'blueprint': {'dataUrl': blueprint} if blueprint else None,
            'snapshot': self.snapshot(),
        }

    def import_state(self, state):
        """Replace every selection with the ones in a project file

        Everything is decoded before the ledger changes, so a bad file leaves
        the current selections in place.
        """
        if not isinstance(state, dict):
            raise InvalidProjectStateError("Project data is not an object")
        raw_selections = state.get('selections')
        if not isinstance(raw_selections, list):
            raise InvalidProjectStateError("Project data has no selections list")

        decoded = []
        for i, raw in enumerate(raw_selections):
            try:
                decoded.append(Selection.from_dict(raw))
            except ValueError as e:
                debug_logger.warning("Ledger", f"Rejected project file: selection {i + 1}: {e}")
                raise InvalidProjectStateError(f"Selection {i + 1} is invalid: {e}")

        self._selections = decoded
        debug_logger.info("Ledger", "Loaded project selections",
                          {'count': len(decoded), 'total_sq_ft': self.total()})
        self._notify()

    # --- listeners -----------------------------------------------------

    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)
