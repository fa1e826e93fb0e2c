"""Account header: avatar, refresh, create affordance."""

from __future__ import annotations

import html

import streamlit as st

from bujo.icons import PLACEHOLDER_AVATAR_GLYPH
from bujo.orchestrator import CreateAffordance, select_create_affordance
from bujo.services import Services
from bujo.store import AccountSnapshot

_AFFORDANCE_LABELS = {
    CreateAffordance.PROJECT: "➕ New project",
    CreateAffordance.ITEM: "➕ New item",
}


def render_myself(services: Services, snapshot: AccountSnapshot) -> None:
    account = snapshot.account
    name = account.username or services.config.username or "Guest"

    avatar_col, refresh_col, create_col = st.columns([3, 1, 1])
    with avatar_col:
        if account.avatar:
            avatar = f"<img class='bujo-avatar' src='{html.escape(account.avatar, quote=True)}' alt=''/>"
        else:
            avatar = f"<span class='bujo-avatar placeholder'>{PLACEHOLDER_AVATAR_GLYPH}</span>"
        st.markdown(f"{avatar} <b>{html.escape(name)}</b>", unsafe_allow_html=True)
    with refresh_col:
        if st.button("🔄", help="Refresh profile, system status and notifications", key="bujo-refresh"):
            services.orchestrator.refresh()
            services.orchestrator.sync_projects()
            services.store.schedule_reconcile()
            st.toast("Refreshing…", icon="🔄")
    with create_col:
        # Creation forms live in the main web client.
        affordance = select_create_affordance(account)
        st.link_button(_AFFORDANCE_LABELS[affordance], services.config.api_base_url, use_container_width=True)
