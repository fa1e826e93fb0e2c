import streamlit as st

from bujo.models import Label, Task, TaskEntry
from bujo.ui import task_item
from bujo.ui.task_item import avatar_html, summary_html
from bujo.view import build_task_summary


class _QueryParams:
    def __init__(self) -> None:
        self.params = {}

    def from_dict(self, params):
        self.params = dict(params)


def test_summary_html_escapes_name_and_colors_labels():
    task = Task(id=4, name="Buy <milk>", labels=(Label(1, "a", "fire"),))
    html = summary_html(build_task_summary(TaskEntry.active(task)))

    assert "<a " not in html
    assert "Buy &lt;milk&gt;" in html
    assert "background:#000061;" in html
    assert "🔥 a" in html
    assert "bujo-task active" in html
    assert "bujo-due" not in html


def test_summary_html_can_leave_the_name_to_the_open_button():
    task = Task(id=4, name="Buy milk", labels=(Label(1, "a", "fire"),))
    html = summary_html(build_task_summary(TaskEntry.active(task)), include_name=False)
    assert "Buy milk" not in html
    assert "bujo-labels" in html


def test_open_task_sets_the_detail_query_param_in_session(monkeypatch):
    params = _QueryParams()
    monkeypatch.setattr(st, "query_params", params)

    task_item.open_task(build_task_summary(TaskEntry.active(Task(id=4, name="x"))).href)

    assert params.params == {"task": "4"}


def test_completed_summary_is_marked():
    html = summary_html(build_task_summary(TaskEntry.completed(Task(id=4, name="x"))))
    assert "bujo-task completed" in html


def test_avatar_with_source_renders_image_with_tooltip():
    task = Task(id=1, name="x", owner="alice", owner_avatar="https://img.test/a.png")
    html = avatar_html(build_task_summary(TaskEntry.active(task)).owner)
    assert html.startswith("<img")
    assert "title='Owner alice'" in html
    assert "src='https://img.test/a.png'" in html


def test_avatar_without_source_renders_placeholder():
    task = Task(id=1, name="x", assignee="bob")
    html = avatar_html(build_task_summary(TaskEntry.active(task)).assignee)
    assert "placeholder" in html
    assert "title='Assignee bob'" in html
