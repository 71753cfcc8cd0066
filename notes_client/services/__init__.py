from .api_client import NotesApiClient, NotesApiError
from .controller import NotesController, NotesView

__all__ = ["NotesApiClient", "NotesApiError", "NotesController", "NotesView"]
