"""
Runtime configuration for the client portal analytics service.

Values come from environment variables so deployments can tune dashboard
windows without code changes.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _list_env(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass(frozen=True)
class Settings:
    """Dashboard tuning knobs."""

    trend_months: int = 6
    month_locale: str = "tr"
    expiry_window_days: int = 30
    expiry_limit: int = 5
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


def load_settings() -> Settings:
    """
    Build a Settings instance from the current environment.

    Unparseable numbers fall back to their defaults.
    """
    return Settings(
        trend_months=max(1, _int_env("PORTAL_TREND_MONTHS", 6)),
        month_locale=os.getenv("PORTAL_MONTH_LOCALE", "tr").strip().lower() or "tr",
        expiry_window_days=max(0, _int_env("PORTAL_EXPIRY_WINDOW_DAYS", 30)),
        expiry_limit=max(1, _int_env("PORTAL_EXPIRY_LIMIT", 5)),
        log_level=os.getenv("PORTAL_LOG_LEVEL", "INFO").upper(),
        cors_origins=_list_env("PORTAL_CORS_ORIGINS", "*"),
    )


settings = load_settings()


__all__ = ["Settings", "load_settings", "settings"]
