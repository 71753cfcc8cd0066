from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

# Checked in order, first non-empty wins.
API_BASE_SOURCES = ("NOTES_API_BASE", "NOTES_BACKEND_URL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True, extra="ignore")

    # Backend
    NOTES_API_BASE: str = ""
    NOTES_BACKEND_URL: str = ""
    NOTES_SAME_ORIGIN_URL: str = "http://127.0.0.1:8000"
    NOTES_API_TIMEOUT_SECONDS: float = 15.0
    NOTES_PATH_CANDIDATES: list[str] = ["/notes", "/api/notes"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    def resolve_api_base(self) -> str:
        for source in API_BASE_SOURCES:
            value = (getattr(self, source) or "").strip()
            if value:
                return value.rstrip("/")
        return ""


@lru_cache
def get_settings() -> Settings:
    return Settings()
