"""One task row: summary card, people avatars and the ``⋮`` action menu."""

from __future__ import annotations

import html
from typing import Optional
from urllib.parse import parse_qsl, urlsplit

import streamlit as st

from bujo.menu import CONFIRM_NO, CONFIRM_YES, MENU_ITEM_TYPE, MenuController, MenuOutcome, TaskAction
from bujo.models import TaskEntry
from bujo.services import Services
from bujo.ui import modals
from bujo.view import AvatarSpec, TaskSummary, build_task_summary


def avatar_html(avatar: AvatarSpec) -> str:
    title = html.escape(avatar.tooltip, quote=True)
    if avatar.placeholder:
        return f"<span class='bujo-avatar placeholder' title='{title}'>{avatar.placeholder}</span>"
    src = html.escape(avatar.src or "", quote=True)
    return f"<img class='bujo-avatar' src='{src}' title='{title}' alt='{title}'/>"


def summary_html(summary: TaskSummary, include_name: bool = True) -> str:
    parts = [f"<div class='bujo-task {summary.state.value}'>"]
    if include_name:
        parts.append(
            "<div class='bujo-task-name'>"
            f"<span class='glyph'>{summary.glyph}</span>{html.escape(summary.name)}"
            "</div>"
        )
    if summary.labels:
        chips = "".join(
            f"<span class='bujo-chip' style='background:{chip.color};'>{chip.glyph} {html.escape(chip.value)}</span>"
            for chip in summary.labels
        )
        parts.append(f"<div class='bujo-labels'>{chips}</div>")
    if summary.due:
        parts.append(f"<div class='bujo-due'>Due {html.escape(summary.due)}</div>")
    parts.append("</div>")
    return "".join(parts)


def open_task(href: str) -> None:
    """Switch to the task detail view in this session instead of reloading the page."""
    st.query_params.from_dict(dict(parse_qsl(urlsplit(href).query)))


def _pending_key(summary: TaskSummary) -> str:
    return f"bujo-menu-pending-{summary.state.value}-{summary.task_id}"


def _load_pending(key: str) -> Optional[TaskAction]:
    raw = st.session_state.get(key)
    try:
        return TaskAction(raw) if raw else None
    except ValueError:
        return None


def _save_pending(key: str, controller: MenuController) -> None:
    if controller.pending is None:
        st.session_state.pop(key, None)
    else:
        st.session_state[key] = controller.pending.value


def _after_command(outcome: MenuOutcome, action: TaskAction) -> None:
    if outcome is MenuOutcome.DISPATCHED:
        st.toast(f"{action.value.capitalize()} requested", icon="⏳")
    elif outcome is MenuOutcome.DUPLICATE:
        st.toast("Already in progress", icon="ℹ️")


def _open_modal(action: TaskAction, services: Services, entry: TaskEntry) -> None:
    if action is TaskAction.EDIT:
        modals.edit_task_dialog(services, entry.task.id)
    elif action is TaskAction.MOVE:
        modals.move_item_dialog(services, MENU_ITEM_TYPE, entry.task.id)
    elif action is TaskAction.SHARE:
        modals.share_item_dialog(services, MENU_ITEM_TYPE, entry.task.id)


def _render_menu(services: Services, entry: TaskEntry, summary: TaskSummary) -> None:
    key = _pending_key(summary)
    controller = MenuController(entry, services.gateway, pending=_load_pending(key))
    suffix = f"{summary.state.value}-{summary.task_id}"

    with st.popover("⋮", use_container_width=True):
        if controller.prompt:
            busy = controller.pending is not None and controller.is_busy(controller.pending)
            st.markdown(f"<div class='bujo-confirm'>{html.escape(controller.prompt)}</div>", unsafe_allow_html=True)
            yes_col, no_col = st.columns(2)
            if yes_col.button(CONFIRM_YES, key=f"bujo-yes-{suffix}", type="primary", disabled=busy):
                action = controller.pending
                outcome = controller.confirm()
                _save_pending(key, controller)
                if action is not None:
                    _after_command(outcome, action)
                st.rerun()
            if no_col.button(CONFIRM_NO, key=f"bujo-no-{suffix}"):
                controller.decline()
                _save_pending(key, controller)
                st.rerun()
            return

        for item in controller.entries:
            clicked = st.button(
                f"{item.glyph} {item.label}",
                key=f"bujo-{item.action.value}-{suffix}",
                type="primary" if item.destructive else "secondary",
                use_container_width=True,
                disabled=controller.is_busy(item.action),
            )
            if not clicked:
                continue
            outcome = controller.select(item.action)
            _save_pending(key, controller)
            if outcome is MenuOutcome.OPEN_MODAL:
                _open_modal(item.action, services, entry)
            elif outcome is MenuOutcome.CONFIRMATION_REQUIRED:
                st.rerun()
            else:
                _after_command(outcome, item.action)


def render_task_item(services: Services, entry: TaskEntry) -> None:
    summary = build_task_summary(entry)
    card_col, people_col, menu_col = st.columns([10, 2, 1])
    with card_col:
        st.button(
            f"{summary.glyph} {summary.name}",
            key=f"bujo-open-{summary.state.value}-{summary.task_id}",
            type="tertiary",
            help="Open task",
            on_click=open_task,
            args=(summary.href,),
        )
        st.markdown(summary_html(summary, include_name=False), unsafe_allow_html=True)
    with people_col:
        st.markdown(
            f"<div class='bujo-people'>{avatar_html(summary.owner)}{avatar_html(summary.assignee)}</div>",
            unsafe_allow_html=True,
        )
    with menu_col:
        _render_menu(services, entry, summary)
