import logging

import streamlit as st

from infrastructure.api.backend_client import ApiError
from services.session_store import NoEmployeeProfileError
from use_cases.route_guard import DASHBOARD_BY_ROLE, LOGIN_PATH, SIGNUP_PATH
from use_cases.session_models import MalformedSessionError
from utils import session_manager

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def validate_signup_form(first_name, last_name, email, password, password_confirm):
    """Returns an error message, or None when the form is acceptable."""
    if not all([first_name.strip(), last_name.strip(), email.strip(), password, password_confirm]):
        return "Please fill in all required fields."
    if "@" not in email:
        return "Please enter a valid email address."
    if password != password_confirm:
        return "Passwords do not match."
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
    return None


def render_login_screen():
    st.title("🔐 Log in to TrackHive")

    with st.form("login_form", clear_on_submit=False):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log in")

    if submitted:
        if not email.strip() or not password:
            st.error("Please enter your email and password.")
            return
        try:
            identity = session_manager.get_store().login(email.strip(), password)
        except NoEmployeeProfileError:
            st.error("Failed to load employee data. Please contact your administrator.")
            return
        except (ApiError, MalformedSessionError) as e:
            st.error(str(e) or "Login failed.")
            return
        session_manager.navigate(DASHBOARD_BY_ROLE[identity.role])

    if st.button("Don't have an account? Sign up", type="secondary"):
        session_manager.navigate(SIGNUP_PATH)


def render_signup_screen():
    st.title("📝 Create an account")

    with st.form("signup_form", clear_on_submit=False):
        c1, c2 = st.columns(2)
        first_name = c1.text_input("First name *")
        last_name = c2.text_input("Last name *")
        email = st.text_input("Email *")
        role = st.selectbox("Role", ["employee", "admin"])
        password = st.text_input("Password *", type="password")
        password_confirm = st.text_input("Confirm password *", type="password")
        submitted = st.form_submit_button("Sign up")

    if submitted:
        error = validate_signup_form(first_name, last_name, email, password, password_confirm)
        if error:
            st.error(error)
            return
        user_data = {
            "firstName": first_name.strip(),
            "lastName": last_name.strip(),
            "email": email.strip(),
            "role": role,
        }
        try:
            identity = session_manager.get_store().signup(user_data, password)
        except (ApiError, MalformedSessionError) as e:
            st.error(str(e) or "Failed to create account")
            return
        session_manager.flash("success", "Your account has been created.")
        session_manager.navigate(DASHBOARD_BY_ROLE[identity.role])

    if st.button("Already have an account? Log in", type="secondary"):
        session_manager.navigate(LOGIN_PATH)
