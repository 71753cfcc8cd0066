from __future__ import annotations

from datetime import datetime

from ..models.note import Note, parse_timestamp

PREVIEW_LENGTH = 90


def format_timestamp(value) -> str:
    millis = parse_timestamp(value) if value else None
    if millis is None:
        return ""
    try:
        return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M:%S")
    except (OverflowError, OSError, ValueError):
        return ""


def display_title(note: Note) -> str:
    return note.title or "Untitled"


def note_preview(note: Note) -> str:
    return note.content.strip()[:PREVIEW_LENGTH] or "No content"


def last_updated(note: Note) -> str:
    return format_timestamp(note.updated_at or note.created_at)


def count_label(count: int) -> str:
    return f"{count} note" if count == 1 else f"{count} notes"
