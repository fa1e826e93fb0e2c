"""Account-level loading: profile, notifications and system status."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future
from enum import Enum
from typing import Any, Callable, Dict

from bujo.api_client import BujoApiClient, Result
from bujo.models import AccountSummary
from bujo.store import AppStore

logger = logging.getLogger(__name__)


class CreateAffordance(str, Enum):
    PROJECT = "create_project"
    ITEM = "create_item"


def select_create_affordance(account: AccountSummary) -> CreateAffordance:
    """No projects at all means the only useful thing to create is a project."""
    if account.project_count == 0:
        return CreateAffordance.PROJECT
    return CreateAffordance.ITEM


class AccountRefreshOrchestrator:
    """Kicks off the account fetches; results are applied to the store.

    Each fetch is independent: one failing does not hold back the others,
    and there is no ordering between them.
    """

    def __init__(self, client: BujoApiClient, store: AppStore, executor: Executor) -> None:
        self._client = client
        self._store = store
        self._executor = executor
        self._mounted = False

    def mount(self) -> bool:
        """First render of a session. Returns False if already mounted."""
        if self._mounted:
            return False
        self._mounted = True
        self._submit("profile", self._store.apply_myself, self._client.fetch_myself, False)
        self._submit("notifications", self._store.apply_notifications, self._client.fetch_notifications)
        return True

    def refresh(self) -> None:
        """User asked for a refresh."""
        self._submit("profile", self._store.apply_myself, self._client.fetch_myself, True)
        self._submit("system", self._store.apply_system, self._client.fetch_system_updates)
        self._submit("notifications", self._store.apply_notifications, self._client.fetch_notifications)

    def sync_projects(self) -> None:
        """Reload owned and shared projects (drives the project picker)."""
        self._submit("projects", self._store.apply_projects, self._client.fetch_projects)

    def _submit(self, what: str, apply: Callable[[Result], None], fn: Callable[..., Result], *args: Any) -> None:
        logger.debug("Fetching %s", what)
        try:
            future = self._executor.submit(fn, *args)
        except RuntimeError as exc:
            apply({"ok": False, "error": str(exc)})
            return
        future.add_done_callback(lambda f: self._deliver(what, apply, f))

    def _deliver(self, what: str, apply: Callable[[Result], None], future: Future) -> None:
        try:
            result: Dict[str, Any] = future.result()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Fetching %s raised", what)
            result = {"ok": False, "error": str(exc)}
        apply(result)
