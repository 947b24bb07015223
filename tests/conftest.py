"""Shared fixtures for turntree tests."""

import pytest

from tests.builders import make_basic_conversation, make_branching_conversation
from turntree.core.collapse import CollapsePolicy
from turntree.core.event_bus import EventBus
from turntree.core.session import SimulationSession


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path, monkeypatch):
    """Keep a user's real config file out of the tests."""
    config_home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    yield config_home


@pytest.fixture
def event_bus():
    return EventBus()


@pytest.fixture
def policy():
    return CollapsePolicy()


@pytest.fixture
def basic_records():
    return make_basic_conversation()


@pytest.fixture
def branching_records():
    return make_branching_conversation()


@pytest.fixture
def session(basic_records, event_bus):
    return SimulationSession(basic_records, bus=event_bus, session_id="test")


@pytest.fixture
def branching_session(branching_records, event_bus):
    return SimulationSession(branching_records, bus=event_bus, session_id="test")
