"""
Admin provisioning of a new employee.

Two backend calls that are not transactional: first an identity with role
`employee` is created, then the employee record linked to it via `userId`.
If the second call fails the identity is left in place (no rollback) and the
caller gets EmployeeProfileCreationError carrying the created identity id.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from infrastructure.api.backend_client import ApiError, BackendClient

log = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "An employee with this email already exists."
REQUIRED_FIELDS = ("firstName", "lastName", "email", "department")
EMPLOYEE_FIELDS = ("firstName", "lastName", "email", "phone", "department", "position", "hireDate", "status", "image")


class ProvisioningError(Exception):
    pass


class IdentityCreationError(ProvisioningError):
    pass


class EmployeeProfileCreationError(ProvisioningError):
    def __init__(self, message: str, user_id: str):
        super().__init__(message)
        self.user_id = user_id


@dataclass(frozen=True)
class ProvisionedEmployee:
    user_id: str
    employee: Dict[str, Any]
    email: str
    initial_password: str


def missing_required_fields(form: Mapping[str, Any]) -> list:
    return [name for name in REQUIRED_FIELDS if not str(form.get(name) or "").strip()]


def _friendly_message(error: Exception, fallback: str) -> str:
    message = str(error) or fallback
    return DUPLICATE_EMAIL_MESSAGE if "duplicate" in message.lower() else message


def provision_employee(
    client: BackendClient,
    form: Mapping[str, Any],
    initial_password: str,
    admin_token: Optional[str] = None,
) -> ProvisionedEmployee:
    missing = missing_required_fields(form)
    if missing:
        raise IdentityCreationError(f"Please fill in all required fields: {', '.join(missing)}")

    user_data = {
        "firstName": form["firstName"],
        "lastName": form["lastName"],
        "email": form["email"],
        "role": "employee",
    }
    try:
        new_user = client.signup(user_data, initial_password)
    except ApiError as e:
        log.error(f"Identity creation failed for {form['email']}: {e}")
        raise IdentityCreationError(_friendly_message(e, "Failed to create user account")) from e

    if not isinstance(new_user, Mapping):
        raise IdentityCreationError("Failed to create user account")
    user_id = new_user.get("_id") or new_user.get("id")
    if not user_id:
        raise IdentityCreationError("Failed to create user account")
    user_id = str(user_id)

    employee_data = {k: form[k] for k in EMPLOYEE_FIELDS if form.get(k) not in (None, "")}
    employee_data.setdefault("status", "active")
    try:
        employee_data["salary"] = float(form.get("salary") or 0)
    except (TypeError, ValueError):
        employee_data["salary"] = 0.0
    employee_data["userId"] = user_id

    # The new identity's own token is used first; the admin token covers
    # backends whose signup response carries none.
    token = new_user.get("token") or admin_token
    try:
        employee = client.add_employee(employee_data, token)
    except ApiError as e:
        log.error(f"Employee profile creation failed for user {user_id}; identity left without profile: {e}")
        raise EmployeeProfileCreationError(
            f"Failed to create employee profile: {_friendly_message(e, 'unknown error')}", user_id
        ) from e

    if not isinstance(employee, Mapping) or not (employee.get("_id") or employee.get("id")):
        log.error(f"Employee profile creation returned no record for user {user_id}")
        raise EmployeeProfileCreationError("Failed to create employee profile", user_id)

    log.info(f"Provisioned employee {employee.get('_id') or employee.get('id')} for user {user_id}")
    return ProvisionedEmployee(
        user_id=user_id,
        employee=dict(employee),
        email=form["email"],
        initial_password=initial_password,
    )
