"""Render-ready summary of a task entry.

Pure functions only; ``bujo.ui.task_item`` turns a ``TaskSummary`` into
Streamlit output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import pendulum

from bujo.icons import DONE_GLYPH, PLACEHOLDER_AVATAR_GLYPH, get_icon, string_to_rgb
from bujo.menu import MenuEntry, compose_menu
from bujo.models import Task, TaskEntry, TaskState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LabelChip:
    value: str
    glyph: str
    color: str


@dataclass(frozen=True)
class AvatarSpec:
    role: str
    name: Optional[str]
    src: Optional[str]

    @property
    def tooltip(self) -> str:
        return f"{self.role} {self.name or ''}".rstrip()

    @property
    def placeholder(self) -> Optional[str]:
        return None if self.src else PLACEHOLDER_AVATAR_GLYPH


@dataclass(frozen=True)
class TaskSummary:
    task_id: int
    state: TaskState
    name: str
    glyph: str
    href: str
    labels: Tuple[LabelChip, ...]
    due: Optional[str]
    owner: AvatarSpec
    assignee: AvatarSpec
    menu: Tuple[MenuEntry, ...]


def task_link(task_id: int) -> str:
    return f"?task={task_id}"


def _day_phrase(days: int) -> str:
    if days == 0:
        return "today"
    unit = "day" if abs(days) == 1 else "days"
    return f"in {days} {unit}" if days > 0 else f"{-days} {unit} ago"


def relative_due(task: Task) -> Optional[str]:
    """Due date relative to now, e.g. ``"in 2 days"``; None when unset or unparseable.

    A date without a time counts whole calendar days in the task's timezone.
    """
    if not task.due_date:
        return None
    tz = task.timezone or "UTC"
    text = task.due_date if not task.due_time else f"{task.due_date}T{task.due_time}"
    try:
        due = pendulum.parse(text, tz=tz)
        today = pendulum.today(tz)
    except (ValueError, LookupError) as exc:
        logger.debug("Ignoring due date %r (tz=%s) on task %s: %s", text, tz, task.id, exc)
        return None
    if not task.due_time:
        return _day_phrase((due.date() - today.date()).days)
    return due.diff_for_humans()


def build_task_summary(entry: TaskEntry, link_builder: Callable[[int], str] = task_link) -> TaskSummary:
    task = entry.task
    glyph = get_icon(task.labels[0].icon) if task.labels else DONE_GLYPH
    return TaskSummary(
        task_id=task.id,
        state=entry.state,
        name=task.name,
        glyph=glyph,
        href=link_builder(task.id),
        labels=tuple(LabelChip(lb.value, get_icon(lb.icon), string_to_rgb(lb.value)) for lb in task.labels),
        due=relative_due(task),
        owner=AvatarSpec("Owner", task.owner, task.owner_avatar),
        assignee=AvatarSpec("Assignee", task.assignee, task.assignee_avatar),
        menu=compose_menu(entry),
    )
