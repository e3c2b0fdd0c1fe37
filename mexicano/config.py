"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def resolve_timezone(name: str) -> tzinfo:
    """Map a zone name to a tzinfo; ``UTC`` needs no tz database."""

    if name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name!r}") from exc


@dataclass(frozen=True)
class Settings:
    database_path: str = "mexicano.db"
    timezone_name: str = "UTC"
    log_level: str = "INFO"
    timezone: tzinfo = field(default=timezone.utc, compare=False)


def load_settings() -> Settings:
    timezone_name = os.getenv("MEXICANO_TIMEZONE", "UTC")
    return Settings(
        database_path=os.getenv("MEXICANO_DB_PATH", "mexicano.db"),
        timezone_name=timezone_name,
        log_level=os.getenv("MEXICANO_LOG_LEVEL", "INFO").upper(),
        timezone=resolve_timezone(timezone_name),
    )


__all__ = ["Settings", "load_settings", "resolve_timezone"]
