"""
Session Store: owner of the current identity and its credential lifecycle.

State machine:

    uninitialized --bootstrap--> resolving --> authenticated | anonymous
    anonymous --login/signup--> authenticated
    authenticated --logout--> anonymous

`resolving` is entered at most once per store. Every write to the identity
slot bumps `generation`; a bootstrap that finds its generation superseded
(e.g. a login finished first) drops its own result.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional

from infrastructure.api.backend_client import ApiError, BackendClient
from infrastructure.storage.local_storage import KeyValueStorage
from use_cases.session_models import (
    EmployeeIdentity,
    Identity,
    MalformedSessionError,
    deserialize_identity,
    identity_from_payload,
    serialize_identity,
)

log = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class NoEmployeeProfileError(Exception):
    def __init__(self, message: str = "No employee profile found. Please contact your administrator."):
        super().__init__(message)


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class LogoutResult:
    warning: Optional[str] = None


def _linked_user_id(employee: Mapping[str, Any]) -> Optional[str]:
    user_ref = employee.get("userId")
    if isinstance(user_ref, Mapping):
        user_ref = user_ref.get("_id") or user_ref.get("id")
    return str(user_ref) if user_ref else None


def find_employee_for_user(employees: Iterable[Mapping[str, Any]], user_id: str) -> Optional[Dict[str, Any]]:
    for employee in employees or []:
        if isinstance(employee, Mapping) and _linked_user_id(employee) == user_id:
            return dict(employee)
    return None


def overlay_employee_record(identity: EmployeeIdentity, record: Mapping[str, Any]) -> EmployeeIdentity:
    """The employee record is authoritative for display names once loaded."""
    record = dict(record)
    return replace(
        identity,
        first_name=record.get("firstName", identity.first_name),
        last_name=record.get("lastName", identity.last_name),
        employee_data=record,
    )


class SessionStore:
    def __init__(self, client: BackendClient, storage: KeyValueStorage, notify_logout: bool = False):
        self.client = client
        self.storage = storage
        self.notify_logout = notify_logout
        self.teardown()

    def teardown(self) -> None:
        self.current_identity: Optional[Identity] = None
        self.is_resolving = True
        self.state = SessionState.UNINITIALIZED
        self.generation = 0

    @property
    def token(self) -> Optional[str]:
        return self.current_identity.token if self.current_identity else None

    @property
    def is_authenticated(self) -> bool:
        return self.current_identity is not None

    # --- internal writes ---
    def _publish(self, identity: Optional[Identity]) -> None:
        self.current_identity = identity
        self.state = SessionState.AUTHENTICATED if identity is not None else SessionState.ANONYMOUS
        self.generation += 1

    def _persist(self, identity: Identity) -> None:
        self.storage.set(TOKEN_KEY, identity.token)
        self.storage.set(USER_KEY, serialize_identity(identity))

    def _clear_persisted(self) -> None:
        self.storage.remove(TOKEN_KEY)
        self.storage.remove(USER_KEY)

    # --- lifecycle ---
    def bootstrap(self) -> Optional[Identity]:
        if self.state is SessionState.UNINITIALIZED:
            self.state = SessionState.RESOLVING
        started_at = self.generation

        try:
            identity = self._restore()
        except Exception:
            log.exception("Failed to restore persisted session")
            self._clear_persisted()
            identity = None

        if self.generation == started_at:
            self._publish(identity)
        else:
            log.info("Bootstrap result superseded by a newer session write; discarding it")
        self.is_resolving = False
        return self.current_identity

    def _restore(self) -> Optional[Identity]:
        token = self.storage.get(TOKEN_KEY)
        raw_user = self.storage.get(USER_KEY)

        if not token and not raw_user:
            return None
        if not token or not raw_user:
            log.warning("Persisted session is incomplete; clearing it")
            self._clear_persisted()
            return None

        try:
            identity = deserialize_identity(raw_user, token=token)
        except MalformedSessionError as e:
            log.warning(f"Persisted identity is malformed, clearing session: {e}")
            self._clear_persisted()
            return None

        if isinstance(identity, EmployeeIdentity):
            identity = self._refresh_employee(identity)
        return identity

    def _refresh_employee(self, identity: EmployeeIdentity) -> EmployeeIdentity:
        lookup_id = identity.employee_id or identity.id
        # Best effort: any failure keeps the stored identity
        try:
            record = self.client.get_employee(lookup_id, identity.token)
            if isinstance(record, Mapping) and record:
                return overlay_employee_record(identity, record)
        except Exception:
            log.exception(f"Error loading employee data for {lookup_id}")
        return identity

    def login(self, email: str, password: str) -> Identity:
        response = self.client.login(email, password)
        identity = identity_from_payload(response)

        if isinstance(identity, EmployeeIdentity):
            employees = self.client.get_employees(identity.token)
            record = find_employee_for_user(employees, identity.id)
            if record is None:
                log.warning(f"Login refused for user {identity.id}: no linked employee profile")
                raise NoEmployeeProfileError()
            employee_id = record.get("_id") or record.get("id")
            identity = overlay_employee_record(
                replace(identity, employee_id=str(employee_id) if employee_id else None),
                record,
            )

        self._persist(identity)
        self._publish(identity)
        log.info(f"User {identity.id} logged in as {identity.role}")
        return identity

    def signup(self, user_data: Mapping[str, Any], password: Optional[str] = None) -> Identity:
        response = self.client.signup(dict(user_data), password)
        identity = identity_from_payload(response)
        self._persist(identity)
        self._publish(identity)
        log.info(f"User {identity.id} signed up as {identity.role}")
        return identity

    def logout(self) -> LogoutResult:
        token = self.token
        warning = None
        if self.notify_logout and token:
            try:
                self.client.logout(token)
            except ApiError as e:
                log.warning(f"Logout notification failed, local session cleared anyway: {e}")
                warning = f"Signed out locally, but the server could not be notified: {e}"

        self._clear_persisted()
        self._publish(None)
        return LogoutResult(warning=warning)
