"""Per-task action menus.

Which entries a task offers depends only on whether it was read from the
active or the completed list. Delete is always gated behind a yes/no
confirmation; Complete and Uncomplete fire straight away; Edit, Move and
Share are handed back to the caller to open the matching dialog.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Tuple

from bujo.gateway import GatewayAction
from bujo.models import ProjectItemType, TaskEntry, TaskState

logger = logging.getLogger(__name__)

DELETE_CONFIRM_TEXT = "Deleting Task also deletes its child tasks. Are you sure?"
CONFIRM_YES = "Yes"
CONFIRM_NO = "No"

MENU_ITEM_TYPE = ProjectItemType.TASK


class TaskAction(str, Enum):
    EDIT = "edit"
    MOVE = "move"
    SHARE = "share"
    COMPLETE = "complete"
    UNCOMPLETE = "uncomplete"
    DELETE = "delete"


class EntryKind(str, Enum):
    MODAL = "modal"
    COMMAND = "command"


@dataclass(frozen=True)
class MenuEntry:
    action: TaskAction
    label: str
    glyph: str
    kind: EntryKind
    destructive: bool = False
    confirm_text: Optional[str] = None

    @property
    def requires_confirmation(self) -> bool:
        return self.confirm_text is not None


EDIT_ENTRY = MenuEntry(TaskAction.EDIT, "Edit", "✏️", EntryKind.MODAL)
MOVE_ENTRY = MenuEntry(TaskAction.MOVE, "Move", "📂", EntryKind.MODAL)
SHARE_ENTRY = MenuEntry(TaskAction.SHARE, "Share", "🔗", EntryKind.MODAL)
COMPLETE_ENTRY = MenuEntry(TaskAction.COMPLETE, "Complete", "✅", EntryKind.COMMAND)
UNCOMPLETE_ENTRY = MenuEntry(TaskAction.UNCOMPLETE, "Uncomplete", "↩️", EntryKind.COMMAND)
DELETE_ENTRY = MenuEntry(
    TaskAction.DELETE, "Delete", "🗑", EntryKind.COMMAND, destructive=True, confirm_text=DELETE_CONFIRM_TEXT
)

ACTIVE_MENU: Tuple[MenuEntry, ...] = (EDIT_ENTRY, MOVE_ENTRY, SHARE_ENTRY, COMPLETE_ENTRY, DELETE_ENTRY)
COMPLETED_MENU: Tuple[MenuEntry, ...] = (UNCOMPLETE_ENTRY, DELETE_ENTRY)


def compose_menu(entry: TaskEntry) -> Tuple[MenuEntry, ...]:
    """Menu entries for a task, in display order."""
    if entry.state is TaskState.COMPLETED:
        return COMPLETED_MENU
    return ACTIVE_MENU


def gateway_action(entry: TaskEntry, action: TaskAction) -> Optional[GatewayAction]:
    """The lifecycle request a command sends; None for dialog entries."""
    if action is TaskAction.COMPLETE:
        return GatewayAction.COMPLETE
    if action is TaskAction.UNCOMPLETE:
        return GatewayAction.UNCOMPLETE
    if action is TaskAction.DELETE:
        if entry.state is TaskState.COMPLETED:
            return GatewayAction.DELETE_COMPLETED
        return GatewayAction.DELETE
    return None


class TaskGateway(Protocol):
    def complete(self, task_id: int) -> bool: ...

    def uncomplete(self, task_id: int) -> bool: ...

    def delete(self, task_id: int) -> bool: ...

    def delete_completed(self, task_id: int) -> bool: ...

    def is_in_flight(self, action: GatewayAction, task_id: int) -> bool: ...


class MenuPhase(str, Enum):
    IDLE = "idle"
    CONFIRMING = "confirming"


class MenuOutcome(str, Enum):
    OPEN_MODAL = "open_modal"
    CONFIRMATION_REQUIRED = "confirmation_required"
    DISPATCHED = "dispatched"
    DUPLICATE = "duplicate"
    DECLINED = "declined"
    IGNORED = "ignored"


class MenuController:
    """State machine behind one task's menu.

    ``pending`` is the action awaiting confirmation. The renderer keeps it in
    ``st.session_state`` and passes it back on the next rerun, so a confirm
    prompt survives the rerun its opening click triggers.
    """

    def __init__(self, entry: TaskEntry, gateway: TaskGateway, pending: Optional[TaskAction] = None) -> None:
        self.entry = entry
        self.gateway = gateway
        self.entries = compose_menu(entry)
        self.pending = pending if pending is not None and self._find(pending) is not None else None

    @property
    def phase(self) -> MenuPhase:
        return MenuPhase.CONFIRMING if self.pending is not None else MenuPhase.IDLE

    @property
    def prompt(self) -> Optional[str]:
        if self.pending is None:
            return None
        found = self._find(self.pending)
        return found.confirm_text if found else None

    def is_busy(self, action: TaskAction) -> bool:
        request = gateway_action(self.entry, action)
        return request is not None and self.gateway.is_in_flight(request, self.entry.task.id)

    def _find(self, action: TaskAction) -> Optional[MenuEntry]:
        for item in self.entries:
            if item.action is action:
                return item
        return None

    def select(self, action: TaskAction) -> MenuOutcome:
        item = self._find(action)
        if item is None:
            raise ValueError(f"{action.value!r} is not available for a {self.entry.state.value} task")
        if item.kind is EntryKind.MODAL:
            return MenuOutcome.OPEN_MODAL
        if item.requires_confirmation:
            self.pending = action
            return MenuOutcome.CONFIRMATION_REQUIRED
        return self._fire(action)

    def confirm(self) -> MenuOutcome:
        if self.pending is None:
            return MenuOutcome.IGNORED
        action, self.pending = self.pending, None
        return self._fire(action)

    def decline(self) -> MenuOutcome:
        if self.pending is None:
            return MenuOutcome.IGNORED
        self.pending = None
        return MenuOutcome.DECLINED

    def _fire(self, action: TaskAction) -> MenuOutcome:
        task_id = self.entry.task.id
        request = gateway_action(self.entry, action)
        if request is None:
            raise ValueError(f"{action.value!r} is not a command")
        sent = getattr(self.gateway, request.value)(task_id)
        if not sent:
            logger.debug("%s for task %s already pending", action.value, task_id)
            return MenuOutcome.DUPLICATE
        return MenuOutcome.DISPATCHED
