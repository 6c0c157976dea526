"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the document submission client."""

    api_url: str = DEFAULT_API_URL
    time_unit: str = "SECONDS"
    request_limit: int = 10
    request_queue_limit: int = 1000
    request_timeout_seconds: float = 30.0
    connect_timeout_seconds: float = 10.0
    shutdown_grace_seconds: float = 5.0
    log_level: str = "INFO"
    token: str | None = None
    signature: str | None = None


def _as_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _as_float(value: str | None, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError:
        return default


def get_settings() -> Settings:
    """Load runtime settings from environment variables."""
    load_dotenv()

    return Settings(
        api_url=os.getenv("CRPT_API_URL", DEFAULT_API_URL).strip() or DEFAULT_API_URL,
        time_unit=os.getenv("CRPT_TIME_UNIT", "SECONDS").strip().upper() or "SECONDS",
        request_limit=_as_int(os.getenv("CRPT_REQUEST_LIMIT"), 10),
        request_queue_limit=_as_int(os.getenv("CRPT_REQUEST_QUEUE_LIMIT"), 1000),
        request_timeout_seconds=_as_float(os.getenv("CRPT_REQUEST_TIMEOUT_SECONDS"), 30.0),
        connect_timeout_seconds=_as_float(os.getenv("CRPT_CONNECT_TIMEOUT_SECONDS"), 10.0),
        shutdown_grace_seconds=_as_float(os.getenv("CRPT_SHUTDOWN_GRACE_SECONDS"), 5.0),
        log_level=os.getenv("CRPT_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        token=os.getenv("CRPT_TOKEN") or None,
        signature=os.getenv("CRPT_SIGNATURE") or None,
    )
