"""Task lifecycle requests to the remote authority.

Calls are fire-and-forget: each one is submitted to an executor and the
caller gets back only whether it was dispatched. Once the request settles a
``MutationEvent`` goes to every listener; the store listens and re-fetches
the affected lists. Nothing here touches local task state.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from bujo.api_client import BujoApiClient, describe_failure

logger = logging.getLogger(__name__)


class GatewayAction(str, Enum):
    COMPLETE = "complete"
    UNCOMPLETE = "uncomplete"
    DELETE = "delete"
    DELETE_COMPLETED = "delete_completed"

    @property
    def client_method(self) -> str:
        return {
            GatewayAction.COMPLETE: "complete_task",
            GatewayAction.UNCOMPLETE: "uncomplete_task",
            GatewayAction.DELETE: "delete_task",
            GatewayAction.DELETE_COMPLETED: "delete_completed_task",
        }[self]

    @property
    def verb(self) -> str:
        return "delete" if self is GatewayAction.DELETE_COMPLETED else self.value


@dataclass(frozen=True)
class MutationEvent:
    action: GatewayAction
    task_id: int
    ok: bool
    error: Optional[str] = None


MutationListener = Callable[[MutationEvent], None]
Notifier = Callable[[str], None]


class TaskActionGateway:
    def __init__(
        self,
        client: BujoApiClient,
        executor: Executor,
        *,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self._client = client
        self._executor = executor
        self._notifier = notifier
        self._listeners: List[MutationListener] = []
        self._in_flight: Set[Tuple[GatewayAction, int]] = set()
        self._lock = threading.Lock()

    def add_listener(self, listener: MutationListener) -> None:
        self._listeners.append(listener)

    def is_in_flight(self, action: GatewayAction, task_id: int) -> bool:
        with self._lock:
            return (action, task_id) in self._in_flight

    def complete(self, task_id: int) -> bool:
        return self._dispatch(GatewayAction.COMPLETE, task_id)

    def uncomplete(self, task_id: int) -> bool:
        return self._dispatch(GatewayAction.UNCOMPLETE, task_id)

    def delete(self, task_id: int) -> bool:
        """Delete an active task together with its child tasks."""
        return self._dispatch(GatewayAction.DELETE, task_id)

    def delete_completed(self, task_id: int) -> bool:
        """Permanently delete a task from the completed list."""
        return self._dispatch(GatewayAction.DELETE_COMPLETED, task_id)

    def _dispatch(self, action: GatewayAction, task_id: int) -> bool:
        key = (action, task_id)
        with self._lock:
            if key in self._in_flight:
                logger.debug("Dropping duplicate %s for task %s (already in flight)", action.value, task_id)
                return False
            self._in_flight.add(key)

        call = getattr(self._client, action.client_method)
        try:
            future = self._executor.submit(call, task_id)
        except RuntimeError as exc:
            # Executor already shut down (app shutting down / reloading).
            with self._lock:
                self._in_flight.discard(key)
            self._settle(key, {"ok": False, "error": str(exc)})
            return False

        logger.info("Dispatched %s for task %s", action.value, task_id)
        future.add_done_callback(lambda f: self._on_done(key, f))
        return True

    def _on_done(self, key: Tuple[GatewayAction, int], future: Future) -> None:
        with self._lock:
            self._in_flight.discard(key)
        try:
            result = future.result()
        except Exception as exc:  # noqa: BLE001
            logger.exception("%s request for task %s raised", key[0].value, key[1])
            result = {"ok": False, "error": str(exc)}
        self._settle(key, result)

    def _settle(self, key: Tuple[GatewayAction, int], result: Dict[str, Any]) -> None:
        action, task_id = key
        ok = bool(result.get("ok"))
        error = None
        if not ok:
            error = describe_failure(result)
            message = f"Could not {action.verb} task {task_id}: {error}"
            logger.warning(message)
            if self._notifier is not None:
                self._notifier(message)

        event = MutationEvent(action=action, task_id=task_id, ok=ok, error=error)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Mutation listener failed for %s", event)
