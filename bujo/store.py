"""Shared, read-mostly state for one Streamlit session.

Views never mutate what they render. Every write swaps in a new
``AccountSnapshot`` under the store lock and bumps ``version``; the page
compares versions to know when a background fetch has landed.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Executor
from dataclasses import dataclass, field, replace
from typing import Any, Deque, Dict, List, Optional, Tuple

from bujo.api_client import BujoApiClient, Result, describe_failure
from bujo.gateway import MutationEvent
from bujo.models import (
    AccountSummary,
    Myself,
    Notification,
    Project,
    ProjectsWithOwner,
    TaskEntry,
    TaskState,
    parse_notifications,
    parse_projects,
    parse_task_entries,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountSnapshot:
    version: int = 0
    myself: Myself = field(default_factory=Myself)
    owned_projects: Tuple[Project, ...] = ()
    shared_projects: Tuple[ProjectsWithOwner, ...] = ()
    selected_project_id: Optional[int] = None
    tasks: Tuple[TaskEntry, ...] = ()
    completed_tasks: Tuple[TaskEntry, ...] = ()
    notifications: Tuple[Notification, ...] = ()
    system: Optional[Dict[str, Any]] = None

    @property
    def account(self) -> AccountSummary:
        return AccountSummary(
            username=self.myself.username,
            avatar=self.myself.avatar,
            owned_projects=self.owned_projects,
            shared_projects=self.shared_projects,
        )

    @property
    def selected_project(self) -> Optional[Project]:
        if self.selected_project_id is None:
            return None
        for project in self.account.todo_projects():
            if project.id == self.selected_project_id:
                return project
        return None

    def find_entry(self, task_id: int) -> Optional[TaskEntry]:
        for entry in self.tasks + self.completed_tasks:
            if entry.task.id == task_id:
                return entry
        return None


class AppStore:
    def __init__(self, client: BujoApiClient, executor: Optional[Executor] = None) -> None:
        self._client = client
        self._executor = executor
        self._lock = threading.Lock()
        self._snapshot = AccountSnapshot()
        self._errors: Deque[str] = deque(maxlen=50)

    def snapshot(self) -> AccountSnapshot:
        return self._snapshot

    def _publish(self, **changes: Any) -> AccountSnapshot:
        with self._lock:
            snap = replace(self._snapshot, version=self._snapshot.version + 1, **changes)
            self._snapshot = snap
        return snap

    # ---------------- errors ----------------

    def report_error(self, message: str) -> None:
        with self._lock:
            self._errors.append(message)

    def has_errors(self) -> bool:
        with self._lock:
            return bool(self._errors)

    def drain_errors(self) -> List[str]:
        with self._lock:
            errors = list(self._errors)
            self._errors.clear()
        return errors

    def _failed(self, what: str, result: Result) -> bool:
        if result.get("ok"):
            return False
        message = f"Could not load {what}: {describe_failure(result)}"
        logger.warning(message)
        self.report_error(message)
        return True

    # ---------------- account ----------------

    def apply_myself(self, result: Result) -> None:
        if self._failed("profile", result):
            return
        self._publish(myself=Myself.from_dict(result.get("body")))

    def apply_notifications(self, result: Result) -> None:
        if self._failed("notifications", result):
            return
        self._publish(notifications=parse_notifications(result.get("body")))

    def apply_system(self, result: Result) -> None:
        if self._failed("system status", result):
            return
        body = result.get("body")
        self._publish(system=body if isinstance(body, dict) else {"raw": body})

    def apply_projects(self, result: Result) -> None:
        if self._failed("projects", result):
            return
        owned, shared = parse_projects(result.get("body"))
        changes: Dict[str, Any] = {"owned_projects": owned, "shared_projects": shared}

        selected = self._snapshot.selected_project_id
        known = {p.id for p in AccountSummary(owned_projects=owned, shared_projects=shared).todo_projects()}
        if selected is not None and selected not in known:
            # Project vanished (deleted or unshared); drop its stale lists.
            changes.update(selected_project_id=None, tasks=(), completed_tasks=())
        self._publish(**changes)

    # ---------------- task lists ----------------

    def select_project(self, project_id: Optional[int]) -> None:
        if project_id == self._snapshot.selected_project_id:
            return
        self._publish(selected_project_id=project_id, tasks=(), completed_tasks=())
        self.schedule_reconcile()

    def schedule_reconcile(self) -> None:
        """Run ``reconcile`` on the executor, or inline when there is none."""
        if self._executor is None:
            self.reconcile()
            return
        try:
            self._executor.submit(self.reconcile)
        except RuntimeError as exc:
            self.report_error(f"Could not load tasks: {exc}")

    def reconcile(self) -> None:
        """Re-fetch the selected project's active and completed lists."""
        project_id = self._snapshot.selected_project_id
        if project_id is None:
            return

        changes: Dict[str, Any] = {}
        active = self._client.fetch_tasks(project_id)
        if not self._failed("tasks", active):
            changes["tasks"] = parse_task_entries(active.get("body") or [], TaskState.ACTIVE)
        completed = self._client.fetch_completed_tasks(project_id)
        if not self._failed("completed tasks", completed):
            changes["completed_tasks"] = parse_task_entries(completed.get("body") or [], TaskState.COMPLETED)

        if self._snapshot.selected_project_id != project_id:
            logger.debug("Discarding lists for project %s; selection changed", project_id)
            return
        if changes:
            self._publish(**changes)

    def on_mutation(self, event: MutationEvent) -> None:
        logger.debug("Reconciling after %s of task %s (ok=%s)", event.action.value, event.task_id, event.ok)
        self.reconcile()
