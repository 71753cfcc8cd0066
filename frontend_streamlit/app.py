import streamlit as st
import streamlit.components.v1 as components

from notes_client.config import get_settings
from notes_client.logging_config import configure_logging
from notes_client.services import NotesApiClient, NotesController
from notes_client.services.formatting import display_title, last_updated, note_preview
from utils.banners import show_api_banner, show_status
from utils.confirm import SessionStateConfirm, render_pending_confirmation, run_action

_FOCUS_TITLE_JS = """
<script>
const input = window.parent.document.querySelector('input[aria-label="Title"]');
if (input) { input.focus(); }
</script>
"""

st.set_page_config(page_title="Notes", layout="wide")


def get_controller() -> NotesController:
    if "controller" not in st.session_state:
        settings = get_settings()
        configure_logging(settings)
        controller = NotesController(NotesApiClient(settings), SessionStateConfirm())
        st.session_state["controller"] = controller
        controller.load()
    return st.session_state["controller"]


def _sync_title(key: str) -> None:
    st.session_state["controller"].edit_title(st.session_state[key])


def _sync_content(key: str) -> None:
    st.session_state["controller"].edit_content(st.session_state[key])


controller = get_controller()
view = controller.view()

header_left, header_right = st.columns([4, 1])
with header_left:
    st.title("Notes")
    st.caption("Create, edit, and delete notes. No login required.")
with header_right:
    st.button(
        "New note",
        key="new-note",
        type="primary",
        disabled=view.busy,
        on_click=run_action,
        args=("create_new",),
    )
    st.button(
        "Refresh", key="refresh", disabled=view.busy, on_click=run_action, args=("refresh", True)
    )

render_pending_confirmation()

list_panel, editor_panel = st.columns([1, 2])

with list_panel:
    st.subheader("Your notes")
    st.caption(view.count_label)
    if view.is_loading:
        st.info("Loading… Fetching notes from the backend.")
    elif not view.notes:
        st.write("**No notes yet**")
        st.caption("Create your first note to get started.")
    else:
        selected_key = view.selected.key if view.selected else None
        for index, note in enumerate(view.notes):
            label = f"**{display_title(note)}**  \n{note_preview(note)}"
            timestamp = last_updated(note)
            if timestamp:
                label += f"  \n{timestamp}"
            st.button(
                label,
                key=f"note-{index}-{note.key}",
                type="primary" if note.key == selected_key else "secondary",
                width="stretch",
                on_click=run_action,
                args=("select", note.id),
            )
    show_api_banner(view)

with editor_panel:
    action_left, action_right, _ = st.columns([1, 1, 4])
    with action_left:
        st.button(
            "Saving…" if view.is_saving else "Save",
            key="save-top",
            type="primary",
            disabled=not view.can_save,
            on_click=run_action,
            args=("save",),
        )
    with action_right:
        st.button(
            "Deleting…" if view.is_deleting else "Delete",
            key="delete",
            disabled=not view.can_delete,
            on_click=run_action,
            args=("delete",),
        )

    show_status(view)

    if view.selected is None:
        st.subheader("No note selected")
        st.caption("Choose a note from the list, or create a new one.")
    else:
        title_key = f"title-{view.editor_revision}"
        content_key = f"content-{view.editor_revision}"
        st.text_input(
            "Title",
            value=view.editor_title,
            key=title_key,
            placeholder="Untitled",
            disabled=view.busy,
            on_change=_sync_title,
            args=(title_key,),
        )
        st.text_area(
            "Content",
            value=view.editor_content,
            key=content_key,
            placeholder="Write your note…",
            height=320,
            disabled=view.busy,
            on_change=_sync_content,
            args=(content_key,),
        )

        st.caption(f"Note ID: `{view.selected.id}`")
        updated = last_updated(view.selected)
        if updated:
            st.caption(f"Last updated: {updated}")
        if view.is_dirty:
            st.warning("Unsaved changes")

        footer_left, footer_right, _ = st.columns([1, 1, 4])
        footer_left.button(
            "Save changes",
            key="save-bottom",
            disabled=not view.can_save,
            on_click=run_action,
            args=("save",),
        )
        footer_right.button(
            "Discard",
            key="discard",
            disabled=not view.can_discard,
            on_click=run_action,
            args=("discard",),
        )

if controller.pop_focus_request() == "title":
    components.html(_FOCUS_TITLE_JS, height=0)

st.divider()
st.caption("Backend wiring uses `NOTES_API_BASE` / `NOTES_BACKEND_URL`.")
