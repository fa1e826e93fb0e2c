from datetime import date

from bujo.models import AccountSummary, Project, ProjectItemType, ProjectsWithOwner, ProjectType, Task
from bujo.ui.modals import build_task_update, move_targets

TASK = Task(id=1, name="Gym", assignee="bob", due_date="2026-10-21", due_time="07:00", timezone="UTC")


def test_unchanged_form_produces_empty_patch():
    assert build_task_update(TASK, "Gym", date(2026, 10, 21), "07:00", "bob") == {}


def test_only_changed_fields_are_sent():
    fields = build_task_update(TASK, " Gym class ", date(2026, 10, 21), "07:00", "")
    assert fields == {"name": "Gym class", "assignedTo": None}


def test_new_due_date_carries_timezone():
    fields = build_task_update(TASK, "Gym", date(2026, 10, 22), "07:00", "bob")
    assert fields == {"dueDate": "2026-10-22", "timezone": "UTC"}


def test_clearing_due_date_clears_time():
    fields = build_task_update(TASK, "Gym", None, "07:00", "bob")
    assert fields == {"dueDate": None, "dueTime": None}


def test_move_targets_match_item_type():
    account = AccountSummary(
        owned_projects=(Project(1, "Home"), Project(2, "Journal", ProjectType.NOTE)),
        shared_projects=(ProjectsWithOwner("bob", (Project(3, "Team"),)),),
    )
    assert [p.id for p in move_targets(account, ProjectItemType.TASK)] == [1, 3]
    assert [p.id for p in move_targets(account, ProjectItemType.NOTE)] == [2]
    assert move_targets(account, ProjectItemType.TRANSACTION) == []


def test_task_without_timezone_falls_back_to_profile_timezone():
    task = Task(id=1, name="Gym")
    fields = build_task_update(task, "Gym", date(2026, 10, 22), "", "", default_timezone="Europe/Paris")
    assert fields == {"dueDate": "2026-10-22", "timezone": "Europe/Paris"}
