"""Edit / Move / Share dialogs opened from a task's action menu.

Each dialog takes ``(item_type, item_id)`` (edit is task only), talks to the
backend directly and asks the store to reconcile on success.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import pendulum
import streamlit as st

from bujo.api_client import describe_failure
from bujo.models import AccountSummary, Project, ProjectItemType, ProjectType, Task
from bujo.services import Services

_PROJECT_TYPE_FOR_ITEM = {
    ProjectItemType.TASK: ProjectType.TODO,
    ProjectItemType.NOTE: ProjectType.NOTE,
    ProjectItemType.TRANSACTION: ProjectType.LEDGER,
}


def build_task_update(
    task: Task,
    name: str,
    due_date: Optional[date],
    due_time: str,
    assignee: str,
    default_timezone: Optional[str] = None,
) -> Dict[str, Any]:
    """PATCH body with only the fields the user actually changed."""
    fields: Dict[str, Any] = {}
    name = name.strip()
    if name and name != task.name:
        fields["name"] = name

    new_date = due_date.isoformat() if due_date else None
    if new_date != task.due_date:
        fields["dueDate"] = new_date
    new_time = due_time.strip() or None
    if new_date is None:
        new_time = None
    if new_time != task.due_time:
        fields["dueTime"] = new_time
    if ("dueDate" in fields or "dueTime" in fields) and new_date:
        fields["timezone"] = task.timezone or default_timezone or pendulum.local_timezone().name

    new_assignee = assignee.strip() or None
    if new_assignee != task.assignee:
        fields["assignedTo"] = new_assignee
    return fields


def move_targets(account: AccountSummary, item_type: ProjectItemType) -> List[Project]:
    wanted = _PROJECT_TYPE_FOR_ITEM[item_type]
    projects = list(account.owned_projects)
    for group in account.shared_projects:
        projects.extend(group.projects)
    return [p for p in projects if p.project_type is wanted]


def _finish(services: Services, message: str) -> None:
    services.store.schedule_reconcile()
    st.toast(message, icon="✅")
    st.rerun()


@st.dialog("Edit Task")
def edit_task_dialog(services: Services, task_id: int) -> None:
    entry = services.store.snapshot().find_entry(task_id)
    if entry is None:
        st.warning("This task is no longer in the current list.")
        return
    task = entry.task

    name = st.text_input("Name", value=task.name)
    current_due = None
    if task.due_date:
        try:
            current_due = date.fromisoformat(task.due_date)
        except ValueError:
            current_due = None
    has_due = st.checkbox("Has due date", value=current_due is not None)
    due_date = st.date_input("Due date", value=current_due or date.today(), disabled=not has_due)
    due_time = st.text_input("Due time (HH:mm)", value=task.due_time or "", disabled=not has_due)
    assignee = st.text_input("Assignee", value=task.assignee or "")

    if st.button("Save", type="primary", use_container_width=True):
        fields = build_task_update(
            task,
            name,
            due_date if has_due else None,
            due_time,
            assignee,
            default_timezone=services.store.snapshot().myself.timezone,
        )
        if not fields:
            st.info("Nothing changed.")
            return
        result = services.client.update_task(task_id, fields)
        if not result.get("ok"):
            st.error(f"Update failed: {describe_failure(result)}")
            return
        _finish(services, "Task updated")


@st.dialog("Move")
def move_item_dialog(services: Services, item_type: ProjectItemType, item_id: int) -> None:
    snapshot = services.store.snapshot()
    targets = [p for p in move_targets(snapshot.account, item_type) if p.id != snapshot.selected_project_id]
    if not targets:
        st.info("No other project to move into.")
        return

    target = st.selectbox("Move to project", targets, format_func=lambda p: p.name or f"#{p.id}")
    if st.button("Move", type="primary", use_container_width=True):
        result = services.client.move_item(item_type, item_id, target.id)
        if not result.get("ok"):
            st.error(f"Move failed: {describe_failure(result)}")
            return
        _finish(services, f"Moved to {target.name}")


@st.dialog("Share")
def share_item_dialog(services: Services, item_type: ProjectItemType, item_id: int) -> None:
    mode = st.radio("Share with", ["User", "Public link"], horizontal=True)
    target_user = None
    if mode == "User":
        target_user = st.text_input("Username").strip() or None

    if st.button("Share", type="primary", use_container_width=True):
        if mode == "User" and not target_user:
            st.warning("Enter a username.")
            return
        result = services.client.share_item(
            item_type,
            item_id,
            target_user=target_user,
            generate_link=mode == "Public link",
        )
        if not result.get("ok"):
            st.error(f"Share failed: {describe_failure(result)}")
            return
        body = result.get("body")
        if mode == "Public link" and body:
            st.code(body.get("link", str(body)) if isinstance(body, dict) else str(body))
            return
        st.toast(f"Shared with {target_user}", icon="✅")
        st.rerun()
