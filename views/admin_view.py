import logging
from datetime import date

import pandas as pd
import plotly.express as px
import streamlit as st

import auth
from infrastructure.api.backend_client import ApiError
from use_cases import employee_provisioning, project_flow
from utils import session_manager

log = logging.getLogger(__name__)

EMPLOYEE_TABLE_COLUMNS = ["firstName", "lastName", "email", "phone", "department", "position", "hireDate", "salary", "status"]
TASK_STATUSES = ["pending", "in-progress", "completed"]


def _report(error):
    if session_manager.handle_api_error(error):
        return
    st.error(str(error))


def _load_employees():
    try:
        return auth.get_backend_client().get_employees(session_manager.current_token()) or []
    except ApiError as e:
        _report(e)
        return []


def employees_frame(employees):
    df = pd.DataFrame(employees)
    if df.empty:
        return pd.DataFrame(columns=["_id"] + EMPLOYEE_TABLE_COLUMNS)
    for col in ["_id"] + EMPLOYEE_TABLE_COLUMNS:
        if col not in df.columns:
            df[col] = None
    return df[["_id"] + EMPLOYEE_TABLE_COLUMNS]


def render_dashboard():
    client = auth.get_backend_client()
    token = session_manager.current_token()
    st.header("⚙️ Admin dashboard")

    employees = _load_employees()
    df = employees_frame(employees)
    c1, c2, c3 = st.columns(3)
    c1.metric("👥 Employees", len(df))
    c2.metric("✅ Active", int((df["status"] == "active").sum()))
    c3.metric("🏢 Departments", int(df["department"].nunique()))

    st.subheader("📢 Announcements")
    with st.form("announcement_form", clear_on_submit=True):
        title = st.text_input("Title")
        content = st.text_area("Message")
        if st.form_submit_button("Publish"):
            if not title.strip() or not content.strip():
                st.error("Title and message are required.")
            else:
                try:
                    client.create_announcement({"title": title.strip(), "content": content.strip()}, token)
                    st.success("Announcement published.")
                except ApiError as e:
                    _report(e)

    try:
        announcements = client.get_announcements(token) or []
    except ApiError as e:
        _report(e)
        announcements = []
    if not announcements:
        st.info("No announcements yet.")
    for item in announcements:
        c_text, c_del = st.columns([5, 1])
        c_text.markdown(f"**{item.get('title', '')}**\n\n{item.get('content', '')}")
        if c_del.button("🗑 Delete", key=f"del_announcement_{item.get('_id')}"):
            try:
                client.delete_announcement(item.get("_id"), token)
                st.rerun()
            except ApiError as e:
                _report(e)


def render_employee_list():
    st.header("👥 Employees")
    if st.button("➕ Add employee", type="primary"):
        session_manager.navigate("/admin/employees/add")

    df = employees_frame(_load_employees())
    if df.empty:
        st.info("No employees found.")
        return

    search = st.text_input("🔍 Search by name or email", "")
    if search:
        needle = search.lower()
        mask = (
            df["firstName"].fillna("").str.lower().str.contains(needle, regex=False)
            | df["lastName"].fillna("").str.lower().str.contains(needle, regex=False)
            | df["email"].fillna("").str.lower().str.contains(needle, regex=False)
        )
        df = df[mask]
    st.dataframe(df.drop(columns=["_id"]), use_container_width=True, hide_index=True)

    labels = {row["_id"]: f"{row['firstName']} {row['lastName']} ({row['email']})" for _, row in df.iterrows()}
    selected = st.selectbox("Employee", list(labels), format_func=labels.get)
    c1, c2 = st.columns(2)
    if c1.button("✏️ Edit", use_container_width=True) and selected:
        st.query_params["id"] = selected
        session_manager.navigate("/admin/employees/edit")
    if c2.button("🗑 Delete", use_container_width=True) and selected:
        try:
            auth.get_backend_client().delete_employee(selected, session_manager.current_token())
            session_manager.flash("success", "Employee deleted.")
            st.rerun()
        except ApiError as e:
            _report(e)


def parse_hire_date(raw):
    parsed = pd.to_datetime(raw, errors="coerce") if raw else pd.NaT
    return date.today() if pd.isna(parsed) else parsed.date()


def parse_salary(raw):
    try:
        return max(float(raw or 0), 0.0)
    except (TypeError, ValueError):
        return 0.0


def _employee_form(key, initial=None):
    initial = initial or {}
    with st.form(key):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name *", value=initial.get("firstName", ""))
        last_name = c2.text_input("Last name *", value=initial.get("lastName", ""))
        email = c1.text_input("Email *", value=initial.get("email", ""))
        phone = c2.text_input("Phone", value=initial.get("phone", ""))
        department = c1.text_input("Department *", value=initial.get("department", ""))
        position = c2.text_input("Position", value=initial.get("position", ""))
        hire_date = c1.date_input("Hire date", value=parse_hire_date(initial.get("hireDate")))
        salary = c2.number_input("Salary", min_value=0.0, value=parse_salary(initial.get("salary")))
        status = c1.selectbox("Status", ["active", "inactive"], index=0 if initial.get("status", "active") == "active" else 1)
        image = c2.file_uploader("Photo", type=["png", "jpg", "jpeg"])
        submitted = st.form_submit_button("Save")

    form = {
        "firstName": first_name.strip(),
        "lastName": last_name.strip(),
        "email": email.strip(),
        "phone": phone.strip(),
        "department": department.strip(),
        "position": position.strip(),
        "hireDate": hire_date.isoformat(),
        "salary": salary,
        "status": status,
    }
    if image is not None:
        form["image"] = (image.name, image.getvalue(), image.type)
    return submitted, form


def render_add_employee():
    st.header("➕ Add employee")
    submitted, form = _employee_form("add_employee_form")
    if not submitted:
        return

    password = auth.get_default_employee_password()
    try:
        result = employee_provisioning.provision_employee(
            auth.get_backend_client(), form, password, admin_token=session_manager.current_token()
        )
    except employee_provisioning.EmployeeProfileCreationError as e:
        st.error(f"{e} The user account ({e.user_id}) was created without a profile; finish it from the employee list or remove it in the backend.")
        return
    except employee_provisioning.IdentityCreationError as e:
        st.error(str(e))
        return

    session_manager.flash(
        "success",
        f"Employee added. Login credentials: {result.email} / {result.initial_password}. "
        "Please share these with the employee.",
    )
    session_manager.navigate("/admin/employees")


def render_edit_employee():
    st.header("✏️ Edit employee")
    employee_id = st.query_params.get("id")
    if not employee_id:
        st.warning("No employee selected.")
        return
    client = auth.get_backend_client()
    token = session_manager.current_token()
    try:
        employee = client.get_employee(employee_id, token)
    except ApiError as e:
        _report(e)
        return
    if not employee:
        st.error("Employee not found.")
        return

    submitted, form = _employee_form("edit_employee_form", employee)
    if submitted:
        missing = employee_provisioning.missing_required_fields(form)
        if missing:
            st.error(f"Please fill in all required fields: {', '.join(missing)}")
            return
        try:
            client.update_employee(employee_id, form, token)
        except ApiError as e:
            _report(e)
            return
        session_manager.flash("success", "Employee updated.")
        session_manager.navigate("/admin/employees")


def render_assign_task():
    st.header("📝 Assign task")
    employees = _load_employees()
    if not employees:
        st.info("Add employees before assigning tasks.")
        return
    names = project_flow.employee_names(employees)

    with st.form("assign_task_form", clear_on_submit=True):
        title = st.text_input("Title *")
        description = st.text_area("Description")
        assigned_to = st.selectbox("Assign to", list(names), format_func=names.get)
        due_date = st.date_input("Due date", value=date.today())
        submitted = st.form_submit_button("Assign")

    if submitted:
        if not title.strip():
            st.error("Title is required.")
            return
        task = {
            "title": title.strip(),
            "description": description.strip(),
            "assignedTo": assigned_to,
            "dueDate": due_date.isoformat(),
            "status": "pending",
        }
        try:
            auth.get_backend_client().create_task(task, session_manager.current_token())
            st.success("Task assigned successfully!")
        except ApiError as e:
            _report(e)


def render_projects():
    st.header("📁 Projects")
    client = auth.get_backend_client()
    token = session_manager.current_token()
    try:
        projects = client.get_projects(token)
        tasks = client.get_tasks(None, token)
    except ApiError as e:
        _report(e)
        return

    board = project_flow.build_project_board(projects, tasks, _load_employees())
    if board.items.empty:
        st.info("No projects or tasks yet.")
        return

    kind = st.radio("Show", ["all", "project", "task"], horizontal=True)
    items = board.items if kind == "all" else board.items[board.items["type"] == kind]
    st.dataframe(items.drop(columns=["id", "assignedTo"]), use_container_width=True, hide_index=True)

    fig = px.pie(board.status_counts, values="count", names="status", hole=0.45, title="Status breakdown")
    st.plotly_chart(fig, use_container_width=True)
