"""Streamlit entrypoint for the probate lead dashboard.

Run with ``streamlit run src/ui/dashboard_app.py``.
"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Add the 'src' directory to sys.path
_CURRENT_FILE_DIR = Path(__file__).resolve().parent
_SRC_DIR = _CURRENT_FILE_DIR.parent

if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

# Local Application Imports
from config.settings import Settings
from core.dependencies import DependencyContainer
from ui.renderers.dashboard_page import DashboardPageRenderer
from ui.state.session_manager import SessionStateManager

st.set_page_config(
    page_title=Settings.PAGE_TITLE,
    layout="wide",
    initial_sidebar_state="collapsed",
    menu_items={
        'Get help': None,
        'Report a Bug': None,
        'About': None
    }
)


@st.cache_resource
def get_container() -> DependencyContainer:
    """One container (logger and HTTP client) per server process."""
    return DependencyContainer()


container = get_container()
ui_logger = container.get_logger()

SessionStateManager.initialize_all_session_state(container.create_controller)

st.title(Settings.PAGE_TITLE)

renderer = DashboardPageRenderer(SessionStateManager.get_controller(), logger_obj=ui_logger)
renderer.render()
