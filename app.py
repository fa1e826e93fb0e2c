import html

import streamlit as st

from bujo.api_client import describe_failure
from bujo.icons import get_icon
from bujo.models import Task
from bujo.services import get_services
from bujo.store import AccountSnapshot
from bujo.theme import set_theme
from bujo.ui.myself import render_myself
from bujo.ui.notifications import render_notifications
from bujo.ui.task_item import render_task_item, summary_html
from bujo.view import build_task_summary

set_theme()

services = get_services()
if services.orchestrator.mount():
    services.orchestrator.sync_projects()

for message in services.store.drain_errors():
    st.toast(message, icon="⚠️")

snapshot = services.store.snapshot()
st.session_state["_bujo_rendered_version"] = snapshot.version


@st.fragment(run_every="2s")
def _watch_store() -> None:
    # Background fetches land in the store; rerun the page when they do.
    moved = services.store.snapshot().version != st.session_state.get("_bujo_rendered_version")
    if moved or services.store.has_errors():
        st.rerun(scope="app")


def _task_detail(snap: AccountSnapshot, raw_id: str) -> None:
    if st.button("← Back", key="bujo-back"):
        st.query_params.clear()
        st.rerun()
    try:
        task_id = int(raw_id)
    except ValueError:
        st.error(f"Invalid task id {raw_id!r}")
        return
    entry = snap.find_entry(task_id)
    if entry is None:
        # Deep links open a fresh session; the lists may not be loaded yet.
        result = services.client.fetch_task(task_id)
        body = result.get("body")
        if not result.get("ok") or not isinstance(body, dict) or "id" not in body:
            st.error(f"Could not load task {task_id}: {describe_failure(result)}")
            return
        task = Task.from_dict(body)
        state = "Unknown"
    else:
        task = entry.task
        state = entry.state.value.capitalize()
        st.markdown(summary_html(build_task_summary(entry)), unsafe_allow_html=True)

    st.subheader(task.name or f"Task #{task.id}")
    rows = [
        ("State", state),
        ("Owner", task.owner or "—"),
        ("Assignee", task.assignee or "—"),
        ("Due", " ".join(x for x in (task.due_date, task.due_time, task.timezone) if x) or "—"),
        ("Labels", ", ".join(f"{get_icon(lb.icon)} {lb.value}" for lb in task.labels) or "—"),
    ]
    st.markdown(
        "".join(f"- **{k}**: {html.escape(v)}\n" for k, v in rows),
        unsafe_allow_html=True,
    )


with st.sidebar:
    render_myself(services, snapshot)
    projects = snapshot.account.todo_projects()
    if projects:
        ids = [p.id for p in projects]
        current = snapshot.selected_project_id if snapshot.selected_project_id in ids else None
        chosen = st.selectbox(
            "Project",
            projects,
            index=ids.index(current) if current is not None else 0,
            format_func=lambda p: p.name or f"#{p.id}",
        )
        if chosen is not None and chosen.id != snapshot.selected_project_id:
            services.store.select_project(chosen.id)
    else:
        st.caption("No projects yet.")
    render_notifications(snapshot.notifications)
    if snapshot.system:
        with st.expander("System status"):
            st.json(snapshot.system)

_watch_store()

task_param = st.query_params.get("task")
if task_param:
    _task_detail(snapshot, task_param)
    st.stop()

project = snapshot.selected_project
st.title(project.name if project else "Tasks")

if project is None:
    st.info("Pick a project to see its tasks.")
    st.stop()

st.markdown(f"<div class='bujo-section-title'>Active ({len(snapshot.tasks)})</div>", unsafe_allow_html=True)
if not snapshot.tasks:
    st.caption("No open tasks.")
for entry in snapshot.tasks:
    render_task_item(services, entry)

st.markdown(
    f"<div class='bujo-section-title'>Completed ({len(snapshot.completed_tasks)})</div>",
    unsafe_allow_html=True,
)
if not snapshot.completed_tasks:
    st.caption("Nothing completed yet.")
for entry in snapshot.completed_tasks:
    render_task_item(services, entry)
