"""
Tests for SessionStateManager with a patched Streamlit session.
"""
from unittest.mock import MagicMock, patch

import pytest

from ui.state.session_manager import SessionStateManager


class FakeSessionState(dict):
    """Dict with attribute access, like ``st.session_state``."""

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError as e:
            raise AttributeError(key) from e

    def __setattr__(self, key, value):
        self[key] = value


@pytest.fixture
def session_state():
    state = FakeSessionState()
    with patch("ui.state.session_manager.st") as mock_st:
        mock_st.session_state = state
        yield state


class TestSessionStateManager:
    """Test session initialization and accessors."""

    def test_controller_created_once(self, session_state):
        factory = MagicMock(side_effect=lambda: object())

        SessionStateManager.initialize_all_session_state(factory)
        controller = SessionStateManager.get_controller()
        SessionStateManager.initialize_all_session_state(factory)

        assert factory.call_count == 1
        assert SessionStateManager.get_controller() is controller
        assert session_state["dashboard_loaded"] is False
        assert session_state["processed_selections"] == {}

    def test_mark_dashboard_loaded(self, session_state):
        SessionStateManager.initialize_all_session_state(lambda: "controller")
        assert SessionStateManager.is_dashboard_loaded() is False

        SessionStateManager.mark_dashboard_loaded()

        assert SessionStateManager.is_dashboard_loaded() is True

    def test_upload_message_popped_once(self, session_state):
        SessionStateManager.set_upload_message(True, "Uploaded a.csv")
        assert SessionStateManager.pop_upload_message() == (True, "Uploaded a.csv")
        assert SessionStateManager.pop_upload_message() is None

    def test_consume_selection(self, session_state):
        """Test a chart selection is processed only once."""
        assert SessionStateManager.consume_selection("chart_a", "0:1:Fulton") is True
        assert SessionStateManager.consume_selection("chart_a", "0:1:Fulton") is False
        assert SessionStateManager.consume_selection("chart_a", "0:2:Cobb") is True
        assert SessionStateManager.consume_selection("chart_a", "") is False
        assert SessionStateManager.consume_selection("chart_a", "0:2:Cobb") is True
