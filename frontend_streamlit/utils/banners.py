import streamlit as st

from notes_client.services import NotesView


def show_api_banner(view: NotesView) -> None:
    st.caption(f"API: `{view.api_base_display}`")


def show_status(view: NotesView) -> None:
    if view.error:
        st.error(view.error)
    if view.info:
        st.info(view.info)
