"""Role-gated navigation: decides render vs. redirect for a page."""

import logging
from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, Literal, Optional

from use_cases.session_models import Identity, Role

log = logging.getLogger(__name__)

GuardAction = Literal["RENDER", "DEFER", "REDIRECT_LOGIN", "REDIRECT_DASHBOARD"]

HOME_PATH = "/"
LOGIN_PATH = "/login"
SIGNUP_PATH = "/signup"
NOT_FOUND_PATH = "/404"
ADMIN_DASHBOARD_PATH = "/admin/dashboard"
EMPLOYEE_DASHBOARD_PATH = "/employee/dashboard"

DASHBOARD_BY_ROLE: Dict[str, str] = {
    "admin": ADMIN_DASHBOARD_PATH,
    "employee": EMPLOYEE_DASHBOARD_PATH,
}

_ADMIN: FrozenSet[Role] = frozenset({"admin"})
_EMPLOYEE: FrozenSet[Role] = frozenset({"employee"})

# Page path -> roles allowed to see it. None marks a public page.
ROUTES: Dict[str, Optional[FrozenSet[Role]]] = {
    HOME_PATH: None,
    LOGIN_PATH: None,
    SIGNUP_PATH: None,
    ADMIN_DASHBOARD_PATH: _ADMIN,
    "/admin/employees": _ADMIN,
    "/admin/employees/add": _ADMIN,
    "/admin/employees/edit": _ADMIN,
    "/admin/assign-task": _ADMIN,
    "/admin/projects": _ADMIN,
    EMPLOYEE_DASHBOARD_PATH: _EMPLOYEE,
    "/employee/profile/edit": _EMPLOYEE,
    "/employee/attendance": _EMPLOYEE,
}


@dataclass(frozen=True)
class GuardDecision:
    action: GuardAction
    target: Optional[str] = None

    @property
    def should_render(self) -> bool:
        return self.action == "RENDER"


def guard(identity: Optional[Identity], is_resolving: bool, allowed_roles: AbstractSet[str]) -> GuardDecision:
    """
    Pure decision for a protected page. While the session is still resolving
    nothing is rendered and no redirect is issued.
    """
    if is_resolving:
        return GuardDecision("DEFER")

    if identity is None:
        return GuardDecision("REDIRECT_LOGIN", LOGIN_PATH)

    if identity.role in allowed_roles:
        return GuardDecision("RENDER")

    log.info(f"Role {identity.role} denied for page requiring {sorted(allowed_roles)}; user {identity.id}")
    return GuardDecision("REDIRECT_DASHBOARD", DASHBOARD_BY_ROLE[identity.role])


def resolve_route(path: Optional[str]) -> str:
    path = (path or HOME_PATH).rstrip("/") or HOME_PATH
    return path if path in ROUTES else NOT_FOUND_PATH


def guard_route(identity: Optional[Identity], is_resolving: bool, path: str) -> GuardDecision:
    allowed = ROUTES.get(path)
    if allowed is None:
        return GuardDecision("RENDER")
    return guard(identity, is_resolving, allowed)
