"""
Shared pytest configuration for Edit Pilot tests.
"""

import pytest

from edit_pilot.config.models import EditPilotConfig, DispatchConfig
from edit_pilot.core.commands import get_default_catalog
from edit_pilot.core.editor import HeadlessEditor, Settler

from .fixtures.workspace import FakeSleep, SAMPLE_WORKSPACE


@pytest.fixture
def fake_sleep():
    """Sleep replacement that records every settle-delay."""
    return FakeSleep()


@pytest.fixture
def workspace():
    return dict(SAMPLE_WORKSPACE)


@pytest.fixture
def editor(workspace):
    """Headless editor over the sample workspace, no readiness signals."""
    return HeadlessEditor(workspace)


@pytest.fixture
def editor_with_file(editor):
    editor.open_file("src/app.py")
    return editor


@pytest.fixture
def catalog():
    return get_default_catalog()


@pytest.fixture
def dispatch_config():
    return DispatchConfig(
        open_settle_seconds=0.3,
        type_settle_seconds=0.5,
        navigate_settle_seconds=0.1,
    )


@pytest.fixture
def settler(dispatch_config, fake_sleep):
    return Settler(dispatch_config, sleep=fake_sleep)


@pytest.fixture
def test_config():
    """Configuration pointing at a fake local completion service."""
    return EditPilotConfig(
        app={"log_level": "DEBUG"},
        completion={"endpoint_url": "http://localhost:1234", "model": "test-model"},
    )


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
