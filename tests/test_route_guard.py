import pytest

from use_cases import route_guard
from use_cases.route_guard import GuardDecision, guard, guard_route, resolve_route
from use_cases.session_models import AdminIdentity, EmployeeIdentity

ADMIN = AdminIdentity(id="1", token="t1")
EMPLOYEE = EmployeeIdentity(id="2", token="t2", employee_id="e2")


def test_admin_on_admin_page_renders():
    assert guard(ADMIN, False, {"admin"}) == GuardDecision("RENDER")


def test_admin_on_employee_page_goes_to_admin_dashboard():
    assert guard(ADMIN, False, {"employee"}) == GuardDecision("REDIRECT_DASHBOARD", "/admin/dashboard")


def test_employee_on_admin_page_goes_to_employee_dashboard():
    assert guard(EMPLOYEE, False, {"admin"}) == GuardDecision("REDIRECT_DASHBOARD", "/employee/dashboard")


def test_anonymous_goes_to_login():
    assert guard(None, False, {"admin"}) == GuardDecision("REDIRECT_LOGIN", "/login")


@pytest.mark.parametrize("identity", [None, ADMIN, EMPLOYEE])
@pytest.mark.parametrize("allowed", [set(), {"admin"}, {"employee"}, {"admin", "employee"}])
def test_resolving_session_defers(identity, allowed):
    decision = guard(identity, True, allowed)
    assert decision == GuardDecision("DEFER")
    assert decision.should_render is False


def test_multiple_roles_allowed():
    assert guard(EMPLOYEE, False, frozenset({"admin", "employee"})).should_render


@pytest.mark.parametrize(
    "path, expected",
    [
        (None, "/"),
        ("", "/"),
        ("/admin/employees/", "/admin/employees"),
        ("/employee/attendance", "/employee/attendance"),
        ("/nope", "/404"),
    ],
)
def test_resolve_route(path, expected):
    assert resolve_route(path) == expected


def test_public_pages_render_for_anyone():
    for path in (route_guard.HOME_PATH, route_guard.LOGIN_PATH, route_guard.NOT_FOUND_PATH):
        assert guard_route(None, False, path).should_render


def test_protected_route_uses_route_table():
    assert guard_route(None, False, "/admin/projects").action == "REDIRECT_LOGIN"
    assert guard_route(EMPLOYEE, False, "/employee/attendance").should_render
    assert guard_route(EMPLOYEE, False, "/admin/projects").target == "/employee/dashboard"
