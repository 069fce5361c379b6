import os
from dataclasses import dataclass
from typing import Optional


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    default_user: str
    default_count: int
    timeout_seconds: Optional[float]
    carousel_api_url: str
    carousel_base_url: Optional[str]
    carousel_max_videos: int
    log_level: str


def load_settings() -> Settings:
    return Settings(
        host=os.getenv("HOST", "0.0.0.0").strip() or "0.0.0.0",
        port=_get_int("PORT", 8080),
        default_user=os.getenv("TIKTOK_DEFAULT_USER", "").strip() or "fringebiscuit",
        default_count=_get_int("TIKTOK_DEFAULT_COUNT", 5),
        timeout_seconds=_get_float("TIKTOK_TIMEOUT_SECONDS", None),
        carousel_api_url=os.getenv("CAROUSEL_API_URL", "").strip() or "/api/tiktoks",
        carousel_base_url=os.getenv("CAROUSEL_BASE_URL", "").strip() or None,
        carousel_max_videos=_get_int("CAROUSEL_MAX_VIDEOS", 5),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )
