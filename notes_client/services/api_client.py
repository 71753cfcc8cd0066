from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable, TypeVar
from urllib.parse import quote

import requests
from requests import Response
from requests.exceptions import RequestException, Timeout
from urllib3.exceptions import HTTPError as TransportError
from urllib3.exceptions import ReadTimeoutError

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

READ_CHUNK_SIZE = 8192


class NotesApiError(Exception):
    """Any failed notes request: transport, timeout or non-2xx status."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class NotesApiClient:
    def __init__(
        self,
        settings: Settings | None = None,
        session: requests.Session | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.base_url = settings.resolve_api_base()
        self.request_origin = self.base_url or settings.NOTES_SAME_ORIGIN_URL.rstrip("/")
        self.timeout = settings.NOTES_API_TIMEOUT_SECONDS
        self.path_candidates = tuple(settings.NOTES_PATH_CANDIDATES)
        self.session = session or requests.Session()

    def configured_base_url(self) -> str:
        """Resolved API base for display; empty means same origin."""
        return self.base_url

    def list_notes(self) -> list[Any]:
        def attempt(base: str) -> list[Any]:
            data = self._request("GET", base)
            if isinstance(data, list):
                return data
            if isinstance(data, dict) and isinstance(data.get("notes"), list):
                return data["notes"]
            logger.warning("Unrecognised notes list shape from %s: %s", base, type(data).__name__)
            return []

        return self._first_success("list", attempt)

    def create_note(self, payload: dict[str, Any]) -> Any:
        return self._first_success(
            "create", lambda base: self._request("POST", base, body=payload)
        )

    def update_note(self, note_id: Any, payload: dict[str, Any]) -> Any:
        return self._first_success(
            "update",
            lambda base: self._request("PUT", _item_path(base, note_id), body=payload),
        )

    def delete_note(self, note_id: Any) -> Any:
        return self._first_success(
            "delete", lambda base: self._request("DELETE", _item_path(base, note_id))
        )

    def _first_success(self, operation: str, attempt: Callable[[str], T]) -> T:
        last_error: NotesApiError | None = None
        for base in self.path_candidates:
            try:
                return attempt(base)
            except NotesApiError as exc:
                logger.warning("Notes %s via %s failed: %s", operation, base, exc.message)
                last_error = exc
        if last_error is None:
            raise NotesApiError(f"No endpoint candidates configured for {operation}")
        raise last_error

    def _build_url(self, path: str) -> str:
        normalized = path if path.startswith("/") else f"/{path}"
        return f"{self.request_origin}{normalized}"

    def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        # The timeout bounds the whole request, not just each socket read.
        deadline = time.monotonic() + self.timeout
        try:
            response = self.session.request(
                method,
                self._build_url(path),
                json=body,
                headers=headers,
                timeout=self.timeout,
                stream=True,
            )
        except Timeout as exc:
            raise self._timed_out() from exc
        except RequestException as exc:
            raise NotesApiError(f"Backend unavailable: {exc}") from exc
        self._read_body(response, deadline)
        return _parse_response(response)

    def _read_body(self, response: Response, deadline: float) -> None:
        if response.raw is None:
            return
        chunks = []
        try:
            while True:
                if time.monotonic() > deadline:
                    raise self._timed_out()
                chunk = response.raw.read1(READ_CHUNK_SIZE, decode_content=True)
                if not chunk:
                    break
                chunks.append(chunk)
        except ReadTimeoutError as exc:
            raise self._timed_out() from exc
        except (TransportError, OSError) as exc:
            raise NotesApiError(f"Backend unavailable: {exc}") from exc
        finally:
            response.close()
        response._content = b"".join(chunks)

    def _timed_out(self) -> NotesApiError:
        return NotesApiError(f"Request timed out after {self.timeout:g}s")


def _item_path(base: str, note_id: Any) -> str:
    return f"{base}/{quote(str(note_id), safe='')}"


def _is_json(response: Response) -> bool:
    return "application/json" in (response.headers.get("content-type") or "")


def _error_detail(response: Response) -> str:
    if _is_json(response):
        try:
            return json.dumps(response.json(), separators=(",", ":"))
        except ValueError:
            return ""
    return response.text or ""


def _parse_response(response: Response) -> Any:
    status = response.status_code
    if not 200 <= status < 300:
        detail = _error_detail(response)
        message = f"Request failed ({status}): {detail}" if detail else f"Request failed ({status})"
        raise NotesApiError(message, status=status)

    if status == 204:
        return None
    if _is_json(response):
        try:
            return response.json()
        except ValueError as exc:
            raise NotesApiError(f"Invalid JSON response ({status}): {exc}", status=status) from exc

    text = response.text
    return {"raw": text} if text else None
