from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict

ID_ALIASES = ("id", "_id", "noteId", "uuid")
CREATED_AT_ALIASES = ("createdAt", "created_at")
UPDATED_AT_ALIASES = ("updatedAt", "updated_at")


class Note(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Any = None
    title: str = ""
    content: str = ""
    created_at: Any = None
    updated_at: Any = None

    @property
    def key(self) -> str:
        return note_key(self.id)

    def merged(self, other: Note) -> Note:
        """Shallow overwrite of this note's fields with ``other``'s."""
        return self.model_copy(update=other.model_dump())


def note_key(note_id: Any) -> str:
    return str(note_id)


def get_field(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_note(raw: Any) -> Note:
    payload = raw if isinstance(raw, dict) else {}
    return Note(
        id=get_field(payload, *ID_ALIASES),
        title=_text(payload.get("title")),
        content=_text(payload.get("content")),
        created_at=get_field(payload, *CREATED_AT_ALIASES),
        updated_at=get_field(payload, *UPDATED_AT_ALIASES),
    )


def normalize_notes(items: Iterable[Any]) -> list[Note]:
    notes = (normalize_note(item) for item in items)
    return [note for note in notes if note.id is not None]


def parse_timestamp(value: Any) -> float | None:
    """Return ``value`` as epoch milliseconds, or None when it is not a timestamp.

    Numbers are taken as epoch milliseconds. Strings are ISO-8601; naive values
    and a trailing ``Z`` are read as UTC.
    """
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def effective_timestamp(note: Note) -> float:
    for value in (note.updated_at, note.created_at):
        if value:
            parsed = parse_timestamp(value)
            return parsed if parsed is not None else 0.0
    return 0.0


def sort_notes(notes: Iterable[Note]) -> list[Note]:
    """Newest first by ``updated_at`` (then ``created_at``), ties by title."""
    return sorted(notes, key=lambda n: (-effective_timestamp(n), n.title.casefold()))
