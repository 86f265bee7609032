import logging

import streamlit as st

from infrastructure import observability
from use_cases import auth_flow, bootstrap, route_guard
from use_cases.session_models import display_name
from utils import session_manager
from views import admin_view, employee_view, login_view

log = logging.getLogger(__name__)


@st.cache_resource
def _init_observability():
    # Once per server process, not once per rerun
    observability.setup_observability()
    return True


def render_home():
    st.title("🐝 Welcome to TrackHive")
    st.write("Employee records, attendance, tasks and projects in one place.")
    c1, c2 = st.columns(2)
    if c1.button("Log in", type="primary", use_container_width=True):
        session_manager.navigate(route_guard.LOGIN_PATH)
    if c2.button("Sign up", use_container_width=True):
        session_manager.navigate(route_guard.SIGNUP_PATH)


def render_not_found():
    st.title("404")
    st.write("Oops! Page not found.")
    if st.button("Return to home"):
        session_manager.navigate(route_guard.HOME_PATH)


PAGE_RENDERERS = {
    route_guard.HOME_PATH: render_home,
    route_guard.LOGIN_PATH: login_view.render_login_screen,
    route_guard.SIGNUP_PATH: login_view.render_signup_screen,
    route_guard.NOT_FOUND_PATH: render_not_found,
    route_guard.ADMIN_DASHBOARD_PATH: admin_view.render_dashboard,
    "/admin/employees": admin_view.render_employee_list,
    "/admin/employees/add": admin_view.render_add_employee,
    "/admin/employees/edit": admin_view.render_edit_employee,
    "/admin/assign-task": admin_view.render_assign_task,
    "/admin/projects": admin_view.render_projects,
    route_guard.EMPLOYEE_DASHBOARD_PATH: employee_view.render_dashboard,
    "/employee/profile/edit": employee_view.render_edit_profile,
    "/employee/attendance": employee_view.render_attendance,
}

NAV_LINKS = {
    "admin": [
        ("🏠 Dashboard", route_guard.ADMIN_DASHBOARD_PATH),
        ("👥 Employees", "/admin/employees"),
        ("📝 Assign task", "/admin/assign-task"),
        ("📁 Projects", "/admin/projects"),
    ],
    "employee": [
        ("🏠 Dashboard", route_guard.EMPLOYEE_DASHBOARD_PATH),
        ("📅 Attendance", "/employee/attendance"),
    ],
}


def render_sidebar(identity):
    with st.sidebar:
        st.markdown(f"**{display_name(identity)}**  \n`{identity.role}`")
        for label, path in NAV_LINKS[identity.role]:
            if st.button(label, key=f"nav_{path}", use_container_width=True):
                session_manager.navigate(path)
        st.divider()
        if st.button("Log out", key="logout_btn", type="secondary"):
            observability.bind_identity(None)
            session_manager.logout()


def main():
    st.set_page_config(page_title="TrackHive", layout="wide", initial_sidebar_state="expanded")
    _init_observability()

    # --- STARTUP ORCHESTRATION ---
    startup_result = bootstrap.run_startup()
    if startup_result.status == "STOP":
        st.stop()

    # --- ROUTE GUARD ---
    requested = st.query_params.get("page") or st.session_state.page
    access = auth_flow.ensure_page_access(requested)
    if access.status == "STOP":
        st.stop()
    if access.status == "REDIRECT":
        session_manager.navigate(access.redirect_to)

    st.session_state.page = access.page

    identity = session_manager.current_identity()
    observability.bind_identity(identity)
    if identity is not None:
        render_sidebar(identity)

    pending = session_manager.pop_flash()
    if pending:
        level, message = pending
        getattr(st, level, st.info)(message)

    PAGE_RENDERERS[access.page]()


if __name__ == "__main__":
    main()
