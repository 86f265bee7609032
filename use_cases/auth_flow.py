"""Authentication flow orchestration (application layer)."""

from dataclasses import dataclass
from typing import Literal, Optional

from use_cases import route_guard
from utils import session_manager

AuthFlowStatus = Literal["CONTINUE", "STOP", "REDIRECT"]


@dataclass(frozen=True)
class AuthFlowResult:
    """Result contract for auth flow orchestration."""

    status: AuthFlowStatus
    reason: str
    page: str
    user_id: Optional[str] = None
    redirect_to: Optional[str] = None


def ensure_page_access(requested_page: Optional[str]) -> AuthFlowResult:
    """Run the route guard for the requested page and return a control-flow status."""
    page = route_guard.resolve_route(requested_page)
    store = session_manager.get_store()
    identity = store.current_identity
    user_id = identity.id if identity is not None else None

    decision = route_guard.guard_route(identity, store.is_resolving, page)
    if decision.action == "DEFER":
        return AuthFlowResult(status="STOP", reason="session_resolving", page=page)
    if decision.action == "REDIRECT_LOGIN":
        return AuthFlowResult(status="REDIRECT", reason="auth_required", page=page, redirect_to=decision.target)
    if decision.action == "REDIRECT_DASHBOARD":
        return AuthFlowResult(
            status="REDIRECT", reason="role_forbidden", page=page, user_id=user_id, redirect_to=decision.target
        )

    # Signed-in users have no business on the login/signup forms.
    if identity is not None and page in (route_guard.LOGIN_PATH, route_guard.SIGNUP_PATH):
        return AuthFlowResult(
            status="REDIRECT",
            reason="already_authenticated",
            page=page,
            user_id=user_id,
            redirect_to=route_guard.DASHBOARD_BY_ROLE[identity.role],
        )

    return AuthFlowResult(status="CONTINUE", reason="allowed", page=page, user_id=user_id)
