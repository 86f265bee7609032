import pytest

from infrastructure.api.backend_client import HttpError
from use_cases.employee_provisioning import (
    DUPLICATE_EMAIL_MESSAGE,
    EmployeeProfileCreationError,
    IdentityCreationError,
    missing_required_fields,
    provision_employee,
)

FORM = {
    "firstName": "Eve",
    "lastName": "Lee",
    "email": "eve@x.com",
    "phone": "555",
    "department": "1",
    "position": "2",
    "hireDate": "2026-10-01",
    "salary": "5000",
    "status": "active",
}


def test_provision_creates_identity_then_linked_profile(client):
    client.signup.return_value = {"_id": "u7", "token": "new-token", "role": "employee"}
    client.add_employee.return_value = {"_id": "e7", "userId": "u7"}

    result = provision_employee(client, FORM, "Welcome123!", admin_token="admin-token")

    client.signup.assert_called_once_with(
        {"firstName": "Eve", "lastName": "Lee", "email": "eve@x.com", "role": "employee"}, "Welcome123!"
    )
    employee_data, token = client.add_employee.call_args.args
    assert token == "new-token"
    assert employee_data["userId"] == "u7"
    assert employee_data["salary"] == 5000.0
    assert employee_data["department"] == "1"
    assert result.user_id == "u7"
    assert result.employee == {"_id": "e7", "userId": "u7"}
    assert result.initial_password == "Welcome123!"


def test_admin_token_used_when_signup_returns_none(client):
    client.signup.return_value = {"_id": "u7", "role": "employee"}
    client.add_employee.return_value = {"_id": "e7"}

    provision_employee(client, FORM, "pw", admin_token="admin-token")

    assert client.add_employee.call_args.args[1] == "admin-token"


def test_missing_fields_rejected_before_any_call(client):
    form = dict(FORM, department="  ")

    with pytest.raises(IdentityCreationError):
        provision_employee(client, form, "pw")

    client.signup.assert_not_called()
    assert missing_required_fields(form) == ["department"]


def test_identity_failure_is_distinct(client):
    client.signup.side_effect = HttpError(500, "Server error")

    with pytest.raises(IdentityCreationError) as excinfo:
        provision_employee(client, FORM, "pw")

    assert not isinstance(excinfo.value, EmployeeProfileCreationError)
    client.add_employee.assert_not_called()


def test_duplicate_email_gets_friendly_message(client):
    client.signup.side_effect = HttpError(400, "E11000 duplicate key error collection: users")

    with pytest.raises(IdentityCreationError) as excinfo:
        provision_employee(client, FORM, "pw")

    assert str(excinfo.value) == DUPLICATE_EMAIL_MESSAGE


def test_profile_failure_keeps_identity_and_reports_it(client):
    client.signup.return_value = {"_id": "u7", "token": "new-token"}
    client.add_employee.side_effect = HttpError(422, "Invalid department")

    with pytest.raises(EmployeeProfileCreationError) as excinfo:
        provision_employee(client, FORM, "pw")

    assert excinfo.value.user_id == "u7"
    assert "Failed to create employee profile" in str(excinfo.value)
    # no rollback of the created identity
    client.delete_employee.assert_not_called()


def test_profile_without_id_is_a_failure(client):
    client.signup.return_value = {"_id": "u7", "token": "new-token"}
    client.add_employee.return_value = {}

    with pytest.raises(EmployeeProfileCreationError):
        provision_employee(client, FORM, "pw")


def test_signup_without_id_is_identity_failure(client):
    client.signup.return_value = {}

    with pytest.raises(IdentityCreationError):
        provision_employee(client, FORM, "pw")
