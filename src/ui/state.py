"""
Session state management for Streamlit app.
"""
import streamlit as st


# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULTS = {
    "date_range": None,
    "selected_collaborators": [],
    "selected_departments": [],
    "selected_macro_activities": [],
    "selected_clients": [],
}


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """Initialize all session state keys with defaults."""
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default


def reset_filters():
    """Clear every entity filter (the date range is re-derived from data)."""
    for key, default in DEFAULTS.items():
        st.session_state[key] = list(default) if isinstance(default, list) else default
