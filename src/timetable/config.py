"""
Configuration

Settings are read from the environment. A .env file in the working directory
is loaded first.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Dict, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from .database.models import Club

# Load environment variables from .env file
load_dotenv()

DEFAULT_UPSTREAM_URL = "https://www.lesmills.co.nz/api/timetable/get-timetable-epi"

CLUBS: Dict[str, Club] = {
    "01": Club("01", "Auckland City"),
    "09": Club("09", "Britomart"),
    "13": Club("13", "Newmarket"),
    "06": Club("06", "Takapuna"),
}


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return parsed


def _timezone_env(name: str, default: str) -> ZoneInfo:
    key = os.getenv(name) or default
    try:
        return ZoneInfo(key)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValueError(f"{name} is not a known timezone: {key!r}") from None


@dataclass(frozen=True)
class Settings:
    database_url: Optional[str] = None
    upstream_url: str = DEFAULT_UPSTREAM_URL
    club_codes: Tuple[str, ...] = tuple(CLUBS)
    reference_timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("Pacific/Auckland"))
    refresh_interval: timedelta = timedelta(hours=6)
    upstream_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        clubs = os.getenv("TIMETABLE_CLUBS")
        club_codes = tuple(c.strip() for c in clubs.split(",") if c.strip()) if clubs else tuple(CLUBS)
        return cls(
            database_url=os.getenv("DATABASE_URL") or None,
            upstream_url=os.getenv("TIMETABLE_UPSTREAM_URL") or DEFAULT_UPSTREAM_URL,
            club_codes=club_codes,
            reference_timezone=_timezone_env("TIMETABLE_TIMEZONE", "Pacific/Auckland"),
            refresh_interval=timedelta(hours=_float_env("TIMETABLE_REFRESH_HOURS", 6)),
            upstream_timeout=_float_env("TIMETABLE_UPSTREAM_TIMEOUT", 30.0),
            log_level=(os.getenv("TIMETABLE_LOG_LEVEL") or "INFO").upper(),
        )
