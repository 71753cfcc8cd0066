from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator

from ..models.note import Note, normalize_note, normalize_notes, note_key, sort_notes
from .api_client import NotesApiClient, NotesApiError
from .formatting import count_label

logger = logging.getLogger(__name__)

ConfirmProvider = Callable[[str], bool]

DEFAULT_TITLE = "Untitled"
SAME_ORIGIN_LABEL = "(same origin)"

CONFIRM_SWITCH = "You have unsaved changes. Discard them and switch notes?"
CONFIRM_CREATE = "You have unsaved changes. Discard them and create a new note?"
CONFIRM_DELETE = "Delete this note? This cannot be undone."
CONFIRM_DISCARD = "Discard unsaved changes?"


@dataclass
class NotesView:
    notes: list[Note]
    selected: Note | None
    editor_title: str
    editor_content: str
    editor_revision: int
    is_dirty: bool
    is_loading: bool
    is_saving: bool
    is_deleting: bool
    busy: bool
    can_save: bool
    can_delete: bool
    can_discard: bool
    error: str
    info: str
    api_base_url: str
    api_base_display: str
    count_label: str


class NotesController:
    """Owns the note collection and the single editing session.

    Every backend call goes through ``client``. State is only changed once a
    call has settled, and a failed call leaves the collection untouched.
    ``confirm`` is asked before any action that throws away a draft or a note;
    a ``False`` answer turns the action into a no-op.
    """

    def __init__(self, client: NotesApiClient, confirm: ConfirmProvider) -> None:
        self.client = client
        self.confirm = confirm

        self.notes: list[Note] = []
        self.selected_id: Any = None

        self.editor_title = ""
        self.editor_content = ""
        self.is_dirty = False
        # Bumped whenever the draft is replaced rather than typed into.
        self.editor_revision = 0

        self.is_loading = False
        self.is_saving = False
        self.is_deleting = False

        self.error = ""
        self.info = ""
        self.focus_request: str | None = None

    @property
    def busy(self) -> bool:
        return self.is_loading or self.is_saving or self.is_deleting

    @property
    def selected_note(self) -> Note | None:
        if self.selected_id is None:
            return None
        key = note_key(self.selected_id)
        return next((n for n in self.notes if n.key == key), None)

    def view(self) -> NotesView:
        selected = self.selected_note
        base_url = self.client.configured_base_url()
        return NotesView(
            notes=sort_notes(self.notes),
            selected=selected,
            editor_title=self.editor_title,
            editor_content=self.editor_content,
            editor_revision=self.editor_revision,
            is_dirty=self.is_dirty,
            is_loading=self.is_loading,
            is_saving=self.is_saving,
            is_deleting=self.is_deleting,
            busy=self.busy,
            can_save=selected is not None and self.is_dirty and not self.busy,
            can_delete=selected is not None and not self.busy,
            can_discard=self.is_dirty and not self.busy,
            error=self.error,
            info=self.info,
            api_base_url=base_url,
            api_base_display=base_url or SAME_ORIGIN_LABEL,
            count_label=count_label(len(self.notes)),
        )

    def pop_focus_request(self) -> str | None:
        target, self.focus_request = self.focus_request, None
        return target

    # Operations

    def load(self) -> bool:
        return self.refresh(keep_selection=True)

    def refresh(self, keep_selection: bool = True) -> bool:
        if self._ignored_while_busy("refresh"):
            return False
        self._clear_messages()
        with self._in_flight("is_loading"):
            return self._reload(keep_selection)

    def select(self, note_id: Any) -> bool:
        switching = self.selected_id is not None and note_key(note_id) != note_key(self.selected_id)
        if self.is_dirty and switching and not self.confirm(CONFIRM_SWITCH):
            return False
        if switching or self.selected_id is None:
            self._clear_messages()
        self._set_selection(note_id)
        return True

    def create_new(self) -> bool:
        if self._ignored_while_busy("create"):
            return False
        self._clear_messages()
        if self.is_dirty and self.selected_id is not None and not self.confirm(CONFIRM_CREATE):
            return False

        with self._in_flight("is_saving"):
            try:
                created = self.client.create_note({"title": DEFAULT_TITLE, "content": ""})
            except NotesApiError as exc:
                self._fail(exc, "Failed to create note.")
                return False

            note = normalize_note(created)
            if note.id is None:
                logger.info("Create response carried no id; reloading notes")
                self._reload(keep_selection=False)
            else:
                logger.info("Created note %s", note.id)
                self.notes = [note, *self.notes]
                self._set_selection(note.id)

            # Stays dirty until the user saves it explicitly.
            self._replace_draft(DEFAULT_TITLE, "")
            self.is_dirty = True
            self.info = "New note created."
            self.focus_request = "title"
        return True

    def save(self) -> bool:
        note = self.selected_note
        if note is None or self._ignored_while_busy("save"):
            return False
        self._clear_messages()
        payload = {
            "title": self.editor_title.strip() or DEFAULT_TITLE,
            "content": self.editor_content,
        }

        with self._in_flight("is_saving"):
            try:
                updated = self.client.update_note(note.id, payload)
            except NotesApiError as exc:
                self._fail(exc, "Failed to save note.")
                return False

            normalized = normalize_note(updated)
            if normalized.id is None:
                self._reload(keep_selection=True)
            else:
                self.notes = [
                    n.merged(normalized) if n.key == normalized.key else n for n in self.notes
                ]
            self.is_dirty = False
            self.info = "Saved."
        logger.info("Saved note %s", note.id)
        return True

    def delete(self) -> bool:
        note = self.selected_note
        if note is None or self._ignored_while_busy("delete"):
            return False
        self._clear_messages()
        if not self.confirm(CONFIRM_DELETE):
            return False

        with self._in_flight("is_deleting"):
            try:
                self.client.delete_note(note.id)
            except NotesApiError as exc:
                self._fail(exc, "Failed to delete note.")
                return False

            remaining = [n for n in self.notes if n.key != note.key]
            self.notes = remaining
            if note_key(self.selected_id) == note.key:
                self._set_selection(remaining[0].id if remaining else None)
            self.is_dirty = False
            self.info = "Deleted."
        logger.info("Deleted note %s", note.id)
        return True

    def edit_title(self, text: str) -> None:
        self.editor_title = text
        self.is_dirty = True

    def edit_content(self, text: str) -> None:
        self.editor_content = text
        self.is_dirty = True

    def discard(self) -> bool:
        if self._ignored_while_busy("discard"):
            return False
        self._clear_messages()
        if not self.confirm(CONFIRM_DISCARD):
            return False
        self._reset_draft()
        self.info = "Changes discarded."
        return True

    # Internals

    def _reload(self, keep_selection: bool) -> bool:
        try:
            fetched = normalize_notes(self.client.list_notes())
        except NotesApiError as exc:
            self._fail(exc, "Failed to load notes.")
            return False

        previous = self.selected_id
        first_id = fetched[0].id if fetched else None
        if not keep_selection or previous is None:
            target = first_id
        elif any(n.key == note_key(previous) for n in fetched):
            target = previous
        else:
            target = first_id

        self.notes = fetched
        self._set_selection(target)
        logger.info("Loaded %s notes", len(fetched))
        return True

    def _set_selection(self, note_id: Any) -> None:
        changed = _optional_key(note_id) != _optional_key(self.selected_id)
        self.selected_id = note_id
        # A clean draft follows the stored note; a dirty one is only replaced on a switch.
        if changed or not self.is_dirty:
            self._reset_draft()

    def _reset_draft(self) -> None:
        note = self.selected_note
        if note is None:
            self._replace_draft("", "")
        else:
            self._replace_draft(note.title, note.content)
        self.is_dirty = False

    def _replace_draft(self, title: str, content: str) -> None:
        self.editor_title = title
        self.editor_content = content
        self.editor_revision += 1

    def _clear_messages(self) -> None:
        self.error = ""
        self.info = ""

    def _fail(self, exc: NotesApiError, fallback: str) -> None:
        self.error = exc.message or fallback
        logger.warning("%s %s", fallback, exc.message)

    def _ignored_while_busy(self, operation: str) -> bool:
        if self.busy:
            logger.debug("Ignoring %s while a request is in flight", operation)
            return True
        return False

    @contextmanager
    def _in_flight(self, flag: str) -> Iterator[None]:
        setattr(self, flag, True)
        try:
            yield
        finally:
            setattr(self, flag, False)


def _optional_key(note_id: Any) -> str | None:
    return None if note_id is None else note_key(note_id)
