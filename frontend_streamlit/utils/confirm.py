import streamlit as st

PENDING_KEY = "pending_confirmation"
APPROVED_KEY = "approved_confirmation"
ACTION_KEY = "pending_action"


class SessionStateConfirm:
    """Confirmation provider for the notes controller.

    Streamlit cannot block on a dialog, so an unanswered question is parked in
    session state and the action asking it is declined. Confirming replays the
    parked action with the question already answered.
    """

    def __call__(self, message: str) -> bool:
        if st.session_state.pop(APPROVED_KEY, None) == message:
            return True
        st.session_state[PENDING_KEY] = message
        return False


def run_action(name: str, *args) -> None:
    controller = st.session_state["controller"]
    st.session_state[PENDING_KEY] = None
    st.session_state[ACTION_KEY] = (name, args)
    getattr(controller, name)(*args)
    if st.session_state.get(PENDING_KEY) is None:
        st.session_state.pop(ACTION_KEY, None)


def _approve() -> None:
    st.session_state[APPROVED_KEY] = st.session_state.get(PENDING_KEY)
    name, args = st.session_state.get(ACTION_KEY) or (None, ())
    if name:
        run_action(name, *args)
    st.session_state.pop(APPROVED_KEY, None)


def _cancel() -> None:
    st.session_state[PENDING_KEY] = None
    st.session_state.pop(ACTION_KEY, None)


def render_pending_confirmation() -> None:
    message = st.session_state.get(PENDING_KEY)
    if not message:
        return
    st.warning(message)
    confirm_col, cancel_col = st.columns(2)
    confirm_col.button("Confirm", key="confirm-yes", type="primary", on_click=_approve)
    cancel_col.button("Cancel", key="confirm-no", on_click=_cancel)
