from unittest.mock import patch

from infrastructure.api.backend_client import HttpError
from infrastructure.storage.local_storage import MemoryStorage
from services.session_store import SessionState
from use_cases.session_models import AdminIdentity
from utils import session_manager


@patch("auth.get_secret", side_effect=lambda key, default=None: "memory" if key == "TRACKHIVE_SESSION_BACKEND" else default)
def test_init_session_state(_mock_secret, session_state):
    session_manager.init_session_state()

    assert session_state.storage_overlay == {}
    assert session_state.flash is None
    assert session_state.page == "/"
    assert isinstance(session_state.session_store.storage, MemoryStorage)
    assert session_state.session_store.is_resolving is True


def test_init_session_state_keeps_existing_store(session_state, store):
    session_state.session_store = store
    session_manager.init_session_state()
    assert session_manager.get_store() is store


def test_bootstrap_session_runs_once(session_state, store):
    session_state.session_store = store

    assert session_manager.bootstrap_session() is None
    assert store.state is SessionState.ANONYMOUS
    generation = store.generation

    session_manager.bootstrap_session()
    assert store.generation == generation


def test_flash_is_shown_once(session_state):
    session_manager.flash("success", "Saved")
    assert session_manager.pop_flash() == ("success", "Saved")
    assert session_manager.pop_flash() is None


@patch("utils.session_manager.navigate")
def test_logout(mock_navigate, session_state, store):
    session_state.session_store = store
    store.storage.set("token", "fake_token")
    store._publish(AdminIdentity(id="1", token="fake_token"))
    session_state.flash = None

    session_manager.logout()

    mock_navigate.assert_called_once_with("/login")
    assert store.current_identity is None
    assert store.storage.get("token") is None
    assert session_state.flash is None


@patch("utils.session_manager.navigate")
def test_logout_surfaces_notification_warning(mock_navigate, session_state, store, client):
    store.notify_logout = True
    client.logout.side_effect = HttpError(500, "boom")
    session_state.session_store = store
    store._publish(AdminIdentity(id="1", token="t"))

    session_manager.logout()

    level, message = session_state.flash
    assert level == "warning"
    assert "boom" in message
    assert store.current_identity is None


@patch("utils.session_manager.navigate")
def test_expired_token_ends_session(mock_navigate, session_state, store):
    session_state.session_store = store
    session_state.flash = None
    store._publish(AdminIdentity(id="1", token="t"))

    handled = session_manager.handle_api_error(HttpError(401, "jwt expired"))

    assert handled is True
    assert store.current_identity is None
    assert session_state.flash[0] == "warning"
    mock_navigate.assert_called_once_with("/login")


@patch("utils.session_manager.navigate")
def test_other_errors_are_left_to_the_caller(mock_navigate, session_state, store):
    session_state.session_store = store
    store._publish(AdminIdentity(id="1", token="t"))

    assert session_manager.handle_api_error(HttpError(401, "invalid signature")) is False
    assert session_manager.handle_api_error(HttpError(500, "jwt expired")) is False
    assert store.current_identity is not None
    mock_navigate.assert_not_called()
