"""Session DTOs shared across application layers."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping, Optional, Union

Role = Literal["admin", "employee"]
ROLES = ("admin", "employee")

# Backend fields mapped onto typed attributes; everything else lands in `extra`.
_KNOWN_FIELDS = {"_id", "id", "email", "firstName", "lastName", "role", "token", "employeeId", "employeeData"}


class MalformedSessionError(ValueError):
    pass


@dataclass(frozen=True)
class AdminIdentity:
    id: str
    token: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    role: Literal["admin"] = "admin"


@dataclass(frozen=True)
class EmployeeIdentity:
    id: str
    token: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    employee_id: Optional[str] = None
    employee_data: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    role: Literal["employee"] = "employee"


Identity = Union[AdminIdentity, EmployeeIdentity]


def is_admin(identity: Identity) -> bool:
    return identity.role == "admin"


def is_employee(identity: Identity) -> bool:
    return identity.role == "employee"


def display_name(identity: Identity) -> str:
    name = " ".join(part for part in (identity.first_name, identity.last_name) if part)
    return name or identity.email or identity.id


def identity_from_payload(payload: Any, token: Optional[str] = None) -> Identity:
    """
    Build an Identity from a backend-shaped dict (login/signup response or the
    persisted copy). `token` overrides the token inside the payload.
    """
    if not isinstance(payload, Mapping):
        raise MalformedSessionError(f"identity must be an object, got {type(payload).__name__}")

    identity_id = payload.get("_id") or payload.get("id")
    if not identity_id:
        raise MalformedSessionError("identity has no id")

    role = payload.get("role")
    if role not in ROLES:
        raise MalformedSessionError(f"unknown role: {role!r}")

    resolved_token = token or payload.get("token")
    if not resolved_token:
        raise MalformedSessionError("identity has no token")

    employee_data = payload.get("employeeData")
    if employee_data is not None and not isinstance(employee_data, Mapping):
        raise MalformedSessionError("employeeData must be an object")

    common = dict(
        id=str(identity_id),
        token=str(resolved_token),
        email=payload.get("email"),
        first_name=payload.get("firstName"),
        last_name=payload.get("lastName"),
        extra={k: v for k, v in payload.items() if k not in _KNOWN_FIELDS},
    )
    if role == "admin":
        return AdminIdentity(**common)
    employee_id = payload.get("employeeId")
    return EmployeeIdentity(
        **common,
        employee_id=str(employee_id) if employee_id else None,
        employee_data=dict(employee_data) if employee_data is not None else None,
    )


def identity_to_payload(identity: Identity) -> Dict[str, Any]:
    payload: Dict[str, Any] = dict(identity.extra)
    payload["_id"] = identity.id
    for key, value in (
        ("email", identity.email),
        ("firstName", identity.first_name),
        ("lastName", identity.last_name),
    ):
        if value is not None:
            payload[key] = value
    payload["role"] = identity.role
    payload["token"] = identity.token
    if isinstance(identity, EmployeeIdentity):
        if identity.employee_id is not None:
            payload["employeeId"] = identity.employee_id
        if identity.employee_data is not None:
            payload["employeeData"] = identity.employee_data
    return payload


def serialize_identity(identity: Identity) -> str:
    return json.dumps(identity_to_payload(identity), ensure_ascii=False)


def deserialize_identity(raw: str, token: Optional[str] = None) -> Identity:
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise MalformedSessionError(f"stored identity is not valid JSON: {e}") from e
    return identity_from_payload(payload, token=token)
