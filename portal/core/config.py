# portal/core/config.py
import re
from typing import List, Literal, Optional

from pydantic import ConfigDict, field_validator
from pydantic_settings import BaseSettings

DEFAULT_API_URL = "http://localhost:5000/api"


def normalize_api_url(raw: Optional[str]) -> str:
    """Turn shorthand backend addresses into an absolute base URL without a trailing slash."""
    url = raw or DEFAULT_API_URL

    # ":5000/api" -> http://localhost:5000/api
    if url.startswith(":"):
        url = f"http://localhost{url}"
    # scheme-relative
    if url.startswith("//"):
        url = f"http:{url}"
    if not re.match(r"^https?://", url, re.IGNORECASE):
        url = f"http://{url}"

    if url.endswith("/"):
        url = url[:-1]

    return url


class Settings(BaseSettings):
    PROJECT_NAME: str = "iBarangay Portal"

    # Backend
    API_URL: str = DEFAULT_API_URL
    REQUEST_TIMEOUT_SECONDS: float = 30.0
    TOKEN_FILE: Optional[str] = None

    # Toasts
    TOAST_DEFAULT_DURATION_MS: int = 4000
    TOAST_MAX_VISIBLE: int = 5
    TOAST_PLACEMENT: Literal["top", "bottom"] = "top"

    # Notifications
    NOTIFICATION_POLL_INTERVAL_SECONDS: float = 10.0
    PAUSE_POLLING_WHEN_HIDDEN: bool = True

    # Lists
    SEARCH_DEBOUNCE_MS: int = 300
    DEFAULT_PAGE_SIZE: int = 10
    PAGE_SIZE_OPTIONS: List[int] = [10, 20, 50, 100]

    EXPORT_DIR: str = "."
    FALLBACK_BARANGAY_NAME: str = "iBarangay"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    model_config = ConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore"
    )

    @field_validator("API_URL", mode="before")
    @classmethod
    def _normalize_api_url(cls, value):
        return normalize_api_url(value)


settings = Settings()
