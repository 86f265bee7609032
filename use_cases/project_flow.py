"""Project board preparation: projects and tasks merged into one table."""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

import pandas as pd

UNKNOWN_EMPLOYEE = "Unknown Employee"
BOARD_COLUMNS = ["id", "type", "name", "description", "dueDate", "status", "assignedTo", "assignee"]


@dataclass(frozen=True)
class ProjectBoard:
    items: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=BOARD_COLUMNS))
    status_counts: pd.DataFrame = field(default_factory=lambda: pd.DataFrame(columns=["status", "count"]))


def _ref_id(ref: Any) -> Optional[str]:
    # assignedTo may be a bare id or a populated employee object
    if isinstance(ref, Mapping):
        ref = ref.get("_id") or ref.get("id")
    return str(ref) if ref else None


def employee_names(employees: Iterable[Mapping[str, Any]]) -> dict:
    names = {}
    for emp in employees or []:
        emp_id = _ref_id(emp)
        if emp_id:
            names[emp_id] = f"{emp.get('firstName', '')} {emp.get('lastName', '')}".strip() or UNKNOWN_EMPLOYEE
    return names


def employee_name(employees: Iterable[Mapping[str, Any]], employee_id: Optional[str]) -> str:
    return employee_names(employees).get(str(employee_id), UNKNOWN_EMPLOYEE) if employee_id else UNKNOWN_EMPLOYEE


def build_project_board(
    projects: Optional[Iterable[Mapping[str, Any]]],
    tasks: Optional[Iterable[Mapping[str, Any]]],
    employees: Optional[Iterable[Mapping[str, Any]]] = None,
) -> ProjectBoard:
    rows = []
    for proj in projects or []:
        rows.append({
            "id": _ref_id(proj),
            "type": "project",
            "name": proj.get("name", ""),
            "description": proj.get("description", ""),
            "dueDate": proj.get("dueDate"),
            "status": proj.get("status"),
            "assignedTo": _ref_id(proj.get("assignedTo")),
        })
    for task in tasks or []:
        rows.append({
            "id": _ref_id(task),
            "type": "task",
            "name": task.get("title", ""),
            "description": task.get("description", ""),
            "dueDate": task.get("dueDate"),
            "status": task.get("status"),
            "assignedTo": _ref_id(task.get("assignedTo")),
        })

    if not rows:
        return ProjectBoard()

    names = employee_names(employees)
    items = pd.DataFrame(rows)
    items["assignee"] = items["assignedTo"].map(lambda ref: names.get(ref, UNKNOWN_EMPLOYEE) if ref else UNKNOWN_EMPLOYEE)
    items["dueDate"] = pd.to_datetime(items["dueDate"], errors="coerce", utc=True)
    items = items.sort_values("dueDate", na_position="last").reset_index(drop=True)[BOARD_COLUMNS]

    status_counts = (
        items.groupby("status", dropna=False).size().reset_index(name="count").sort_values("count", ascending=False)
    )
    return ProjectBoard(items=items, status_counts=status_counts.reset_index(drop=True))
