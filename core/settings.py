"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "Homebase"


DATA_DIR = Path(os.environ.get("HOMEBASE_DATA_DIR") or get_default_data_dir(APP_NAME))
LOG_DIR = DATA_DIR / "logs"

for _dir in (DATA_DIR, LOG_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "app.db"
CONFIG_PATH = DATA_DIR / "config.json"


@dataclass(frozen=True)
class GridSettings:
    # end_hour is exclusive: the last visible row is 21:00-22:00
    start_hour: int = 6
    end_hour: int = 22
    pixels_per_hour: float = 60.0
    min_pixels_per_hour: float = 30.0
    max_pixels_per_hour: float = 120.0
    default_task_duration_minutes: int = 30
    default_event_duration_minutes: int = 60
    default_assign_hour: int = 9
    week_start_day: int = 0  # 0 = Sunday


@dataclass(frozen=True)
class ThemeColors:
    safe_surface_bg: str = "#F1F5F9"
    outline: str = "#E5E7EB"
    text_subtle: str = "#6B7280"
    today_bg: str = "#EEF2FF"
    now_line: str = "#EF4444"
    chip: str = "#E0E7FF"
    chip_text: str = "#1F2937"
    event_bg: str = "#DBEAFE"
    overdue_text: str = "#DC2626"


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "system"
    color_scheme_seed: str = "#0EA5E9"
    window_min_width: int = 900
    window_min_height: int = 600
    day_column_width: int = 150
    hours_column_width: int = 56
    side_panel_width: int = 260
    theme: ThemeColors = ThemeColors()


@dataclass(frozen=True)
class LogSettings:
    directory: Path = LOG_DIR
    level: str = "INFO"
    max_bytes: int = 1_000_000
    backup_count: int = 3
    fmt: str = "%(asctime)s [%(levelname)s] %(message)s"


GRID = GridSettings()
UI = UISettings()
LOGGING = LogSettings()


# Sentinel calendar id for items that are not linked to any calendar.
UNASSIGNED_CALENDAR_ID = "unassigned"


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "DB_PATH",
    "CONFIG_PATH",
    "GRID",
    "UI",
    "LOGGING",
    "UNASSIGNED_CALENDAR_ID",
    "GridSettings",
    "LogSettings",
    "UISettings",
    "get_default_data_dir",
]
