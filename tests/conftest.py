"""pytest configuration and fixtures for pyqt-fieldkit tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from pyqt_fieldkit.config import set_fieldkit_config


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts and ends with the default configuration."""
    set_fieldkit_config(None)
    yield
    set_fieldkit_config(None)


class RecordingForm:
    """Minimal form-state manager that records every call in order."""

    def __init__(self, **values):
        self.values = dict(values)
        self.calls = []

    def set_value(self, name, value, mark_dirty=True):
        self.calls.append(("set_value", name, value, mark_dirty))
        self.values[name] = value

    def trigger(self, name):
        self.calls.append(("trigger", name))
        return True


@pytest.fixture
def recording_form():
    return RecordingForm()
