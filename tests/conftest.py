import pytest

from notes_client.config import get_settings

NOTES_ENV_VARS = (
    "NOTES_API_BASE",
    "NOTES_BACKEND_URL",
    "NOTES_SAME_ORIGIN_URL",
    "NOTES_API_TIMEOUT_SECONDS",
    "NOTES_PATH_CANDIDATES",
    "LOG_LEVEL",
    "LOG_JSON",
)


@pytest.fixture
def clean_settings(monkeypatch, tmp_path):
    # Keep a developer's .env out of the tests.
    monkeypatch.chdir(tmp_path)
    for name in NOTES_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
