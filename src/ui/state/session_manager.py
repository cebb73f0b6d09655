"""
Centralized session state management for the Streamlit dashboard.

The dashboard controller (filters, sort, page and every data source) lives
in the session once and is handed to the renderers; nothing else keeps a
copy of the filter state.
"""

from typing import Any, Callable, Dict, Optional

import streamlit as st

from ui.services.dashboard_controller import DashboardController


class SessionStateManager:
    """Manages Streamlit session state with type-safe accessors."""

    CONTROLLER_KEY = "dashboard_controller"

    UI_KEYS: Dict[str, Any] = {
        "dashboard_loaded": False,
        "upload_message": None,
        "export_result": None,
        "export_error": None,
        "processed_selections": lambda: {},
    }

    @classmethod
    def initialize_all_session_state(cls, controller_factory: Callable[[], DashboardController]) -> None:
        """Initialize the controller and UI keys with their default values."""
        if cls.CONTROLLER_KEY not in st.session_state:
            st.session_state[cls.CONTROLLER_KEY] = controller_factory()
        for key, default_value in cls.UI_KEYS.items():
            if key not in st.session_state:
                st.session_state[key] = default_value() if callable(default_value) else default_value

    @classmethod
    def get_controller(cls) -> DashboardController:
        """Get the session's dashboard controller."""
        return st.session_state[cls.CONTROLLER_KEY]

    @classmethod
    def is_dashboard_loaded(cls) -> bool:
        return bool(st.session_state.get("dashboard_loaded", False))

    @classmethod
    def mark_dashboard_loaded(cls) -> None:
        st.session_state.dashboard_loaded = True

    @classmethod
    def set_upload_message(cls, ok: bool, message: str) -> None:
        st.session_state.upload_message = (ok, message)

    @classmethod
    def pop_upload_message(cls) -> Optional[tuple]:
        message = st.session_state.get("upload_message")
        st.session_state.upload_message = None
        return message

    @classmethod
    def set_export_result(cls, result: Any = None, error: Optional[str] = None) -> None:
        st.session_state.export_result = result
        st.session_state.export_error = error

    @classmethod
    def consume_selection(cls, chart_key: str, signature: str) -> bool:
        """Record a chart selection; True only the first time it is seen."""
        processed = st.session_state.setdefault("processed_selections", {})
        if processed.get(chart_key, "") == signature:
            return False
        processed[chart_key] = signature
        return bool(signature)
