from unittest.mock import patch

from use_cases import auth_flow
from use_cases.session_models import AdminIdentity, EmployeeIdentity


def _with_store(store):
    return patch("use_cases.auth_flow.session_manager.get_store", return_value=store)


def test_stop_while_session_resolving(store):
    with _with_store(store):
        result = auth_flow.ensure_page_access("/admin/dashboard")

    assert result.status == "STOP"
    assert result.reason == "session_resolving"


def test_redirect_to_login_without_user(store):
    store.bootstrap()
    with _with_store(store):
        result = auth_flow.ensure_page_access("/employee/attendance")

    assert result.status == "REDIRECT"
    assert result.reason == "auth_required"
    assert result.redirect_to == "/login"
    assert result.user_id is None


def test_wrong_role_goes_to_own_dashboard(store):
    store.bootstrap()
    store._publish(EmployeeIdentity(id="7", token="t", employee_id="e7"))
    with _with_store(store):
        result = auth_flow.ensure_page_access("/admin/employees")

    assert result.status == "REDIRECT"
    assert result.reason == "role_forbidden"
    assert result.redirect_to == "/employee/dashboard"
    assert result.user_id == "7"


def test_continue_with_matching_role(store):
    store.bootstrap()
    store._publish(AdminIdentity(id="42", token="t"))
    with _with_store(store):
        result = auth_flow.ensure_page_access("/admin/projects/")

    assert result.status == "CONTINUE"
    assert result.page == "/admin/projects"
    assert result.user_id == "42"


def test_signed_in_user_skips_login_form(store):
    store.bootstrap()
    store._publish(AdminIdentity(id="42", token="t"))
    with _with_store(store):
        result = auth_flow.ensure_page_access("/login")

    assert result.reason == "already_authenticated"
    assert result.redirect_to == "/admin/dashboard"


def test_public_and_unknown_pages_render_for_anonymous(store):
    store.bootstrap()
    with _with_store(store):
        home = auth_flow.ensure_page_access(None)
        missing = auth_flow.ensure_page_access("/nowhere")

    assert home.status == "CONTINUE"
    assert home.page == "/"
    assert missing.status == "CONTINUE"
    assert missing.page == "/404"
