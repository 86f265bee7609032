import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

from infrastructure.api.backend_client import DEFAULT_API_URL, BackendClient
from infrastructure.storage.local_storage import BrowserCookieStorage, MemoryStorage, session_file_storage
from services.session_store import SessionStore

DEFAULT_TIMEOUT = 10
DEFAULT_SESSION_DIR = ".trackhive_sessions"
DEFAULT_EMPLOYEE_PASSWORD = "Welcome123!"


def get_secret(key, default=None):
    try:
        value = st.secrets.get(key)
    except (FileNotFoundError, StreamlitAPIException):
        # No secrets.toml configured
        value = None
    if value is None:
        value = os.getenv(key)
    return default if value is None else value


def _get_flag(key, default=False):
    value = get_secret(key)
    if value is None:
        return default
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def get_api_url():
    return get_secret("TRACKHIVE_API_URL", DEFAULT_API_URL)


def get_request_timeout():
    raw = get_secret("TRACKHIVE_REQUEST_TIMEOUT")
    try:
        return float(raw) if raw is not None else DEFAULT_TIMEOUT
    except ValueError:
        return DEFAULT_TIMEOUT


def get_default_employee_password():
    return get_secret("TRACKHIVE_DEFAULT_EMPLOYEE_PASSWORD", DEFAULT_EMPLOYEE_PASSWORD)


_backend_client = None


def get_backend_client() -> BackendClient:
    global _backend_client
    api_url = get_api_url()
    if _backend_client is None or _backend_client.base_url != api_url.rstrip("/"):
        _backend_client = BackendClient(api_url, timeout=get_request_timeout())
    return _backend_client


def create_session_storage(overlay=None):
    backend = str(get_secret("TRACKHIVE_SESSION_BACKEND", "browser")).lower()
    if backend == "file":
        cookies = BrowserCookieStorage(overlay=overlay)
        return session_file_storage(get_secret("TRACKHIVE_SESSION_DIR", DEFAULT_SESSION_DIR), cookies)
    if backend == "memory":
        return MemoryStorage()
    return BrowserCookieStorage(overlay=overlay)


def create_session_store(storage=None) -> SessionStore:
    return SessionStore(
        get_backend_client(),
        storage if storage is not None else create_session_storage(),
        notify_logout=_get_flag("TRACKHIVE_LOGOUT_NOTIFY"),
    )
