import plotly.express as px
import streamlit as st

import auth
from infrastructure.api.backend_client import ApiError
from services import attendance_service
from use_cases.session_models import display_name
from utils import session_manager

TASK_STATUSES = ["pending", "in-progress", "completed"]
PROFILE_FIELDS = ["email", "phone", "department", "position", "hireDate", "status"]


def _report(error):
    if session_manager.handle_api_error(error):
        return
    st.error(str(error))


def _current_employee():
    try:
        return auth.get_backend_client().get_current_employee(session_manager.current_token())
    except ApiError as e:
        _report(e)
        return None


def _employee_id(employee):
    identity = session_manager.current_identity()
    if employee:
        return employee.get("_id") or employee.get("id")
    return getattr(identity, "employee_id", None)


def render_dashboard():
    identity = session_manager.current_identity()
    st.header(f"👋 Welcome, {display_name(identity)}")

    employee = _current_employee()
    if not employee:
        st.warning("Your employee profile is not available yet.")
        return

    st.subheader("🪪 Profile")
    cols = st.columns(3)
    for i, field in enumerate(PROFILE_FIELDS):
        cols[i % 3].markdown(f"**{field}**  \n{employee.get(field) or '-'}")
    if st.button("✏️ Edit profile"):
        session_manager.navigate("/employee/profile/edit")

    client = auth.get_backend_client()
    token = session_manager.current_token()
    emp_id = _employee_id(employee)

    st.subheader("🕒 Recent activity")
    try:
        activities = client.get_activities(emp_id, token) or []
    except ApiError as e:
        _report(e)
        activities = []
    if activities:
        for item in activities[:10]:
            st.write(f"- {item.get('description') or item.get('action') or item}")
    else:
        st.caption("No recent activity.")

    st.subheader("📢 Announcements")
    try:
        announcements = client.get_announcements(token) or []
    except ApiError as e:
        _report(e)
        announcements = []
    if not announcements:
        st.info("No announcements.")
    for item in announcements:
        st.markdown(f"**{item.get('title', '')}**\n\n{item.get('content', '')}")
        st.divider()


def render_edit_profile():
    st.header("✏️ Edit profile")
    employee = _current_employee()
    if not employee:
        return

    with st.form("edit_profile_form"):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name", value=employee.get("firstName", ""))
        last_name = c2.text_input("Last name", value=employee.get("lastName", ""))
        phone = c1.text_input("Phone", value=employee.get("phone", ""))
        image = c2.file_uploader("Photo", type=["png", "jpg", "jpeg"])
        submitted = st.form_submit_button("Save")

    if submitted:
        data = {"firstName": first_name.strip(), "lastName": last_name.strip(), "phone": phone.strip()}
        if image is not None:
            data["image"] = (image.name, image.getvalue(), image.type)
        try:
            auth.get_backend_client().update_employee(_employee_id(employee), data, session_manager.current_token())
        except ApiError as e:
            _report(e)
            return
        session_manager.flash("success", "Profile updated.")
        session_manager.navigate("/employee/dashboard")


def render_attendance():
    st.header("📅 Attendance")
    employee = _current_employee()
    emp_id = _employee_id(employee)
    if not emp_id:
        st.warning("Your employee profile is not available yet.")
        return

    client = auth.get_backend_client()
    token = session_manager.current_token()
    tab_attendance, tab_tasks = st.tabs(["🕒 Attendance", "✅ Tasks"])

    with tab_attendance:
        try:
            records = client.get_attendance(emp_id, token)
        except ApiError as e:
            _report(e)
            records = []
        df = attendance_service.build_attendance_frame(records)
        actions = attendance_service.attendance_actions(df, attendance_service.utc_today())

        c1, c2 = st.columns(2)
        if c1.button("▶️ Check in", disabled=not actions["can_check_in"], use_container_width=True):
            try:
                client.check_in(emp_id, token)
                session_manager.flash("success", "Checked in.")
                st.rerun()
            except ApiError as e:
                _report(e)
        if c2.button("⏹ Check out", disabled=not actions["can_check_out"], use_container_width=True):
            try:
                client.check_out(emp_id, token)
                session_manager.flash("success", "Checked out.")
                st.rerun()
            except ApiError as e:
                _report(e)

        summary = attendance_service.summarize_attendance(df)
        m1, m2, m3 = st.columns(3)
        m1.metric("Days", summary["days"])
        m2.metric("Total hours", f"{summary['total_hours']:.1f}")
        m3.metric("Avg hours/day", f"{summary['avg_hours']:.1f}")

        per_day = attendance_service.daily_hours(df)
        if not per_day.empty:
            fig = px.bar(per_day, x="date", y="hours", title="Hours per day")
            st.plotly_chart(fig, use_container_width=True)
        st.dataframe(df, use_container_width=True, hide_index=True)

    with tab_tasks:
        try:
            tasks = client.get_tasks(emp_id, token) or []
        except ApiError as e:
            _report(e)
            tasks = []
        if not tasks:
            st.info("No tasks assigned.")
        for task in tasks:
            task_id = task.get("_id")
            current = task.get("status", "pending")
            c_text, c_status = st.columns([3, 1])
            c_text.markdown(f"**{task.get('title', '')}**  \n{task.get('description', '')}  \nDue: {task.get('dueDate') or '-'}")
            new_status = c_status.selectbox(
                "Status",
                TASK_STATUSES,
                index=TASK_STATUSES.index(current) if current in TASK_STATUSES else 0,
                key=f"task_status_{task_id}",
                label_visibility="collapsed",
            )
            if new_status != current:
                try:
                    client.update_task(task_id, {"status": new_status}, token)
                    session_manager.flash("success", "Task status updated successfully.")
                    st.rerun()
                except ApiError as e:
                    _report(e)
