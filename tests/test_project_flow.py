from use_cases.project_flow import UNKNOWN_EMPLOYEE, build_project_board, employee_name

EMPLOYEES = [
    {"_id": "e1", "firstName": "Ann", "lastName": "Lee"},
    {"_id": "e2", "firstName": "Bob", "lastName": "Ray"},
]


def test_empty_inputs_give_empty_board():
    board = build_project_board(None, [], EMPLOYEES)
    assert board.items.empty
    assert board.status_counts.empty


def test_projects_and_tasks_are_merged():
    projects = [{"_id": "p1", "name": "Portal v2", "dueDate": "2026-12-31", "status": "in-progress", "assignedTo": {"_id": "e1"}}]
    tasks = [{"_id": "t1", "title": "Write docs", "dueDate": "2026-11-01", "status": "pending", "assignedTo": "e2"}]

    board = build_project_board(projects, tasks, EMPLOYEES)

    assert list(board.items["id"]) == ["t1", "p1"]  # sorted by due date
    assert list(board.items["type"]) == ["task", "project"]
    assert list(board.items["name"]) == ["Write docs", "Portal v2"]
    assert list(board.items["assignee"]) == ["Bob Ray", "Ann Lee"]


def test_unassigned_or_unknown_assignee():
    tasks = [
        {"_id": "t1", "title": "A", "status": "pending", "assignedTo": None},
        {"_id": "t2", "title": "B", "status": "pending", "assignedTo": "ghost"},
    ]

    board = build_project_board([], tasks, EMPLOYEES)

    assert set(board.items["assignee"]) == {UNKNOWN_EMPLOYEE}


def test_status_counts():
    tasks = [
        {"_id": "t1", "title": "A", "status": "pending"},
        {"_id": "t2", "title": "B", "status": "pending"},
        {"_id": "t3", "title": "C", "status": "completed"},
    ]

    board = build_project_board([], tasks)

    counts = dict(zip(board.status_counts["status"], board.status_counts["count"]))
    assert counts == {"pending": 2, "completed": 1}


def test_employee_name_lookup():
    assert employee_name(EMPLOYEES, "e2") == "Bob Ray"
    assert employee_name(EMPLOYEES, "missing") == UNKNOWN_EMPLOYEE
    assert employee_name(EMPLOYEES, None) == UNKNOWN_EMPLOYEE
