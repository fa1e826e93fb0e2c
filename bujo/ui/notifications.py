from __future__ import annotations

from typing import Optional, Sequence

import pandas as pd
import pendulum
import streamlit as st

from bujo.models import Notification

COLUMNS = ["Title", "From", "When", "Type"]


def notification_age(timestamp: Optional[int]) -> Optional[str]:
    """Epoch milliseconds -> "3 hours ago"."""
    if not timestamp:
        return None
    return pendulum.from_timestamp(timestamp / 1000).diff_for_humans()


def notifications_frame(notifications: Sequence[Notification]) -> pd.DataFrame:
    rows = [
        {
            "Title": n.title,
            "From": n.originator or "",
            "When": notification_age(n.timestamp) or "",
            "Type": n.type or "",
        }
        for n in notifications
    ]
    return pd.DataFrame(rows, columns=COLUMNS)


def render_notifications(notifications: Sequence[Notification]) -> None:
    st.markdown(f"<div class='bujo-section-title'>Notifications ({len(notifications)})</div>", unsafe_allow_html=True)
    if not notifications:
        st.caption("Nothing new.")
        return
    st.dataframe(notifications_frame(notifications), use_container_width=True, hide_index=True)
