#!/usr/bin/env python3
"""
Minimal test of the main window and dialogs (offscreen Qt)
"""

import json
import os
import sys
import tempfile

# Use offscreen platform for headless test environments
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
os.environ.setdefault("BFE_DATA_DIR", tempfile.mkdtemp(prefix="bfe_test_"))

import pytest
from PySide6.QtWidgets import QApplication, QComboBox, QLineEdit

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src'))

from chat.relay_client import ChatRelayClient
from drawing.drawing_tools import ToolType, PointerDown, PointerUp
from drawing.estimator_controller import EstimatorController
from drawing.measurement_requests import rect_dimensions_request, triangle_method_request
from models.key_value_store import MemoryKeyValueStore
from models.project_store import projects_key
from ui.dialogs.measurement_dialog import MeasurementDialog
from ui.estimator_window import EstimatorWindow


app = QApplication.instance() or QApplication(sys.argv)


@pytest.fixture
def window():
    controller = EstimatorController(require_blueprint=False)
    window = EstimatorWindow(MemoryKeyValueStore(), controller=controller,
                             chat_client=ChatRelayClient("http://127.0.0.1:9/api/chat"))
    # Answer measurement requests from the test instead of modal dialogs
    window._prompting = True
    controller.set_canvas_size(800, 600)
    yield window
    window.close()
    window.deleteLater()


def test_window_starts_empty(window):
    assert window.total_label.text() == "Total: 0.00 sq ft"
    assert window.count_label.text() == "Saved areas: 0"
    assert not window.undo_action.isEnabled()
    assert window.mode_actions[ToolType.RECTANGLE].isChecked()
    assert window.account_label.text() == "Not signed in"


def test_saved_area_updates_totals(window):
    controller = window.controller
    controller.handle_event(PointerDown(100, 100))
    controller.handle_event(PointerUp(300, 250))
    controller.resolve({'width_ft': "10", 'height_ft': "12"})
    controller.resolve({'label': "Kitchen"})

    assert window.total_label.text() == "Total: 120.00 sq ft"
    assert window.areas_list.count() == 1
    assert window.areas_list.item(0).text().startswith("Kitchen (Rectangle): 120.00 sq ft")
    assert window.undo_action.isEnabled()

    window.undo_last()
    assert window.total_label.text() == "Total: 0.00 sq ft"


def test_mode_action_follows_controller(window):
    window.set_mode(ToolType.POLYGON)
    assert window.controller.mode == ToolType.POLYGON
    assert window.mode_actions[ToolType.POLYGON].isChecked()


def test_save_and_load_project(window):
    controller = window.controller
    controller.handle_event(PointerDown(100, 100))
    controller.handle_event(PointerUp(300, 250))
    controller.resolve({'width_ft': "10", 'height_ft': "12"})
    controller.resolve({'label': ""})

    panel = window.projects_panel
    panel.name_edit.setText("Main floor")
    panel.save_project()
    assert panel.project_list.count() == 1
    assert panel.project_list.item(0).text().startswith("Main floor")

    controller.clear()
    panel.project_list.setCurrentRow(0)
    panel.load_selected()
    assert controller.ledger.count == 1
    assert window.total_label.text() == "Total: 120.00 sq ft"


def test_window_opens_with_unreadable_project_times():
    store = MemoryKeyValueStore()
    store.set(projects_key(None), json.dumps([{'id': "a", 'name': "Old", 'updatedAt': "yesterday"},
                                              {'id': "b", 'name': "New", 'updatedAt': 5}]))
    window = EstimatorWindow(store, controller=EstimatorController(require_blueprint=False),
                             chat_client=ChatRelayClient("http://127.0.0.1:9/api/chat"))
    try:
        panel = window.projects_panel
        assert panel.project_list.count() == 2
        assert panel.project_list.item(0).text().startswith("New")
        assert panel.project_list.item(1).text() == "Old • 0 sq ft • 0 areas"
    finally:
        window.close()
        window.deleteLater()


def test_sign_in_scopes_projects(window):
    window.accounts.register("alice", "pw")
    window.set_account("alice")
    assert window.account_label.text() == "Signed in as alice"
    assert window.projects_panel.owner == "alice"
    assert not window.sign_in_action.isEnabled()

    window.sign_out()
    assert window.projects_panel.owner is None
    assert window.accounts.current_user() is None


def test_measurement_dialog_fields():
    dialog = MeasurementDialog(rect_dimensions_request().with_error("Real width (feet): Enter a length"))
    assert isinstance(dialog.inputs['width_ft'], QLineEdit)
    assert dialog.values() == {'width_ft': "10", 'height_ft': "12"}

    dialog.inputs['width_ft'].setText("12' 6\"")
    assert dialog.values()['width_ft'] == "12' 6\""

    choice = MeasurementDialog(triangle_method_request())
    assert isinstance(choice.inputs['method'], QComboBox)
    assert choice.values() == {'method': "base_height"}


if __name__ == '__main__':
    sys.exit(pytest.main([__file__, '-v']))
