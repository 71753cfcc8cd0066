from .note import Note, normalize_note, normalize_notes, note_key, sort_notes

__all__ = [
    "Note",
    "normalize_note",
    "normalize_notes",
    "note_key",
    "sort_notes",
]
