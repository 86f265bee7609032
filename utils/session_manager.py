import logging

import streamlit as st

import auth
from infrastructure.api.backend_client import HttpError
from services.session_store import SessionStore
from use_cases.route_guard import LOGIN_PATH

log = logging.getLogger(__name__)

"""
SESSION STATE CONTRACT

Keys in st.session_state (one browser session == one application lifetime):

session_store: SessionStore | None
    owner of the current identity and its credentials
    default: created by init_session_state()
    owner: session_manager

storage_overlay: dict
    writes to browser storage not yet echoed back in request cookies
    default: {}
    owner: session_manager

flash: tuple[str, str] | None
    (level, message) shown once on the next render
    default: None
    owner: views

page: str
    current page path, mirrored to the `page` query parameter
    default: "/"
    owner: app
"""


def init_session_state():
    if "storage_overlay" not in st.session_state:
        st.session_state.storage_overlay = {}
    if "flash" not in st.session_state:
        st.session_state.flash = None
    if "page" not in st.session_state:
        st.session_state.page = "/"
    if st.session_state.get("session_store") is None:
        storage = auth.create_session_storage(overlay=st.session_state.storage_overlay)
        st.session_state.session_store = auth.create_session_store(storage)


def get_store() -> SessionStore:
    init_session_state()
    return st.session_state.session_store


def bootstrap_session():
    """Runs the persisted-credential check once per store."""
    store = get_store()
    if store.is_resolving:
        store.bootstrap()
    return store.current_identity


def current_identity():
    return get_store().current_identity


def current_token():
    return get_store().token


def flash(level, message):
    st.session_state.flash = (level, message)


def pop_flash():
    message = st.session_state.get("flash")
    st.session_state.flash = None
    return message


def navigate(path):
    st.session_state.page = path
    st.query_params["page"] = path
    st.rerun()


def logout():
    result = get_store().logout()
    if result.warning:
        flash("warning", result.warning)
    navigate(LOGIN_PATH)


def is_session_expired(error) -> bool:
    return isinstance(error, HttpError) and error.status == 401 and error.message == "jwt expired"


def handle_api_error(error) -> bool:
    """
    Ends the session when the backend reports an expired token.
    Returns True when the error was handled this way.
    """
    if not is_session_expired(error):
        return False
    log.info("Token expired; signing out")
    get_store().logout()
    flash("warning", "Your session has expired. Please log in again.")
    navigate(LOGIN_PATH)
    return True
