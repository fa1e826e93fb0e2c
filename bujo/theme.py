"""Page config and the task list stylesheet."""

from pathlib import Path

import streamlit as st
from streamlit.errors import StreamlitAPIException

CSS_PATH = Path(__file__).with_name("assets") / "theme.css"


def set_theme(page_title: str = "Bullet Journal") -> None:
    try:
        st.set_page_config(page_title=page_title, page_icon="📓", layout="wide")
    except StreamlitAPIException:
        # Already configured for this run.
        pass
    st.markdown(f"<style>{CSS_PATH.read_text(encoding='utf-8')}</style>", unsafe_allow_html=True)
