"""Application layer contracts for orchestrating high-level flows.

`auth_flow` and `bootstrap` depend on the Streamlit session glue and are
imported explicitly by the entry point.
"""

from .employee_provisioning import (
    EmployeeProfileCreationError,
    IdentityCreationError,
    ProvisionedEmployee,
    provision_employee,
)
from .project_flow import ProjectBoard, build_project_board
from .route_guard import GuardDecision, guard, guard_route, resolve_route
from .session_models import (
    AdminIdentity,
    EmployeeIdentity,
    Identity,
    MalformedSessionError,
    Role,
    is_admin,
    is_employee,
)

__all__ = [
    "AdminIdentity",
    "EmployeeIdentity",
    "EmployeeProfileCreationError",
    "GuardDecision",
    "Identity",
    "IdentityCreationError",
    "MalformedSessionError",
    "ProjectBoard",
    "ProvisionedEmployee",
    "Role",
    "build_project_board",
    "guard",
    "guard_route",
    "is_admin",
    "is_employee",
    "provision_employee",
    "resolve_route",
]
