"""Domain records parsed from the BulletJournal REST payloads.

Parsing is tolerant: missing optional fields become None / empty, and
entries that are not JSON objects are skipped rather than failing a whole
list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple


def _safe_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    if isinstance(v, str):
        s = v.strip()
        return s or None
    return str(v)


def _user_fields(raw: Dict[str, Any], name_key: str, avatar_key: str) -> Tuple[Optional[str], Optional[str]]:
    # Older payloads carry flat strings; newer ones nest {name, avatar}.
    value = raw.get(name_key)
    avatar = _safe_str(raw.get(avatar_key))
    if isinstance(value, dict):
        return _safe_str(value.get("name")), avatar or _safe_str(value.get("avatar"))
    return _safe_str(value), avatar


class ProjectType(str, Enum):
    TODO = "TODO"
    NOTE = "NOTE"
    LEDGER = "LEDGER"


class ProjectItemType(str, Enum):
    """Item kinds the move/share collaborators accept."""

    TASK = "task"
    NOTE = "note"
    TRANSACTION = "transaction"

    @property
    def route(self) -> str:
        return {
            ProjectItemType.TASK: "tasks",
            ProjectItemType.NOTE: "notes",
            ProjectItemType.TRANSACTION: "transactions",
        }[self]


@dataclass(frozen=True)
class Label:
    id: Optional[int]
    value: str
    icon: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Label":
        return cls(
            id=raw.get("id"),
            value=_safe_str(raw.get("value")) or "",
            icon=_safe_str(raw.get("icon")),
        )


@dataclass(frozen=True)
class Task:
    id: int
    name: str
    owner: Optional[str] = None
    owner_avatar: Optional[str] = None
    assignee: Optional[str] = None
    assignee_avatar: Optional[str] = None
    due_date: Optional[str] = None
    due_time: Optional[str] = None
    timezone: Optional[str] = None
    labels: Tuple[Label, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Task":
        owner, owner_avatar = _user_fields(raw, "owner", "ownerAvatar")
        assignee, assignee_avatar = _user_fields(raw, "assignedTo", "assignedToAvatar")
        labels = tuple(Label.from_dict(lb) for lb in (raw.get("labels") or []) if isinstance(lb, dict))
        return cls(
            id=raw["id"],
            name=_safe_str(raw.get("name")) or "",
            owner=owner,
            owner_avatar=owner_avatar,
            assignee=assignee,
            assignee_avatar=assignee_avatar,
            due_date=_safe_str(raw.get("dueDate")),
            due_time=_safe_str(raw.get("dueTime")),
            timezone=_safe_str(raw.get("timezone")),
            labels=labels,
        )


class TaskState(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class TaskEntry:
    """A task tagged with the list it was read from.

    The same task id can legitimately show up in both lists over time; the
    tag decides how it renders and which actions apply.
    """

    state: TaskState
    task: Task

    @classmethod
    def active(cls, task: Task) -> "TaskEntry":
        return cls(TaskState.ACTIVE, task)

    @classmethod
    def completed(cls, task: Task) -> "TaskEntry":
        return cls(TaskState.COMPLETED, task)

    @property
    def is_complete(self) -> bool:
        return self.state is TaskState.COMPLETED


def flatten_tasks(raw_tasks: Iterable[Any]) -> List[Dict[str, Any]]:
    """Depth-first flatten of a task tree (``subTasks``) preserving order."""
    out: List[Dict[str, Any]] = []
    for raw in raw_tasks or []:
        if not isinstance(raw, dict):
            continue
        out.append(raw)
        out.extend(flatten_tasks(raw.get("subTasks") or []))
    return out


def parse_task_entries(raw_tasks: Iterable[Any], state: TaskState) -> Tuple[TaskEntry, ...]:
    entries = []
    for raw in flatten_tasks(raw_tasks):
        if raw.get("id") is None:
            continue
        entries.append(TaskEntry(state, Task.from_dict(raw)))
    return tuple(entries)


@dataclass(frozen=True)
class Project:
    id: int
    name: str
    project_type: ProjectType = ProjectType.TODO
    owner: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Project":
        try:
            ptype = ProjectType(str(raw.get("projectType") or "TODO").upper())
        except ValueError:
            ptype = ProjectType.TODO
        owner, _ = _user_fields(raw, "owner", "ownerAvatar")
        return cls(id=raw["id"], name=_safe_str(raw.get("name")) or "", project_type=ptype, owner=owner)


@dataclass(frozen=True)
class ProjectsWithOwner:
    owner: Optional[str]
    projects: Tuple[Project, ...] = ()

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ProjectsWithOwner":
        owner, _ = _user_fields(raw, "owner", "ownerAvatar")
        return cls(owner=owner, projects=tuple(flatten_projects(raw.get("projects") or [])))


def flatten_projects(raw_list: Iterable[Any]) -> List[Project]:
    """Projects nest via ``subProjects``; selection lists want them flat."""
    out: List[Project] = []
    for raw in raw_list or []:
        if not isinstance(raw, dict):
            continue
        if raw.get("id") is not None:
            out.append(Project.from_dict(raw))
        out.extend(flatten_projects(raw.get("subProjects") or []))
    return out


def parse_projects(body: Any) -> Tuple[Tuple[Project, ...], Tuple[ProjectsWithOwner, ...]]:
    """Split a ``GET /api/projects`` body into (owned, shared)."""
    if not isinstance(body, dict):
        return (), ()
    owned = tuple(flatten_projects(body.get("owned") or []))
    shared = tuple(ProjectsWithOwner.from_dict(s) for s in (body.get("shared") or []) if isinstance(s, dict))
    return owned, shared


@dataclass(frozen=True)
class AccountSummary:
    username: Optional[str] = None
    avatar: Optional[str] = None
    owned_projects: Tuple[Project, ...] = ()
    shared_projects: Tuple[ProjectsWithOwner, ...] = ()

    @property
    def project_count(self) -> int:
        return len(self.owned_projects) + len(self.shared_projects)

    def todo_projects(self) -> List[Project]:
        projects = list(self.owned_projects)
        for group in self.shared_projects:
            projects.extend(group.projects)
        return [p for p in projects if p.project_type is ProjectType.TODO]


@dataclass(frozen=True)
class Notification:
    id: Optional[int]
    title: str
    content: Optional[str] = None
    originator: Optional[str] = None
    timestamp: Optional[int] = None
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Notification":
        originator, _ = _user_fields(raw, "originator", "originatorAvatar")
        return cls(
            id=raw.get("id"),
            title=_safe_str(raw.get("title")) or "",
            content=_safe_str(raw.get("content")),
            originator=originator,
            timestamp=raw.get("timestamp"),
            type=_safe_str(raw.get("type")),
        )


def parse_notifications(body: Any) -> Tuple[Notification, ...]:
    if not isinstance(body, list):
        return ()
    return tuple(Notification.from_dict(n) for n in body if isinstance(n, dict))


@dataclass(frozen=True)
class Myself:
    username: Optional[str] = None
    avatar: Optional[str] = None
    timezone: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "Myself":
        if not isinstance(raw, dict):
            return cls()
        return cls(
            username=_safe_str(raw.get("username") or raw.get("name")),
            avatar=_safe_str(raw.get("avatar")),
            timezone=_safe_str(raw.get("timezone")),
        )
