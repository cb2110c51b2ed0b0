"""Simple JSON-backed configuration store."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.settings import CONFIG_PATH, GRID, LOGGING


@dataclass
class AppConfig:
    """User preferences persisted to ``config.json``."""

    week_start_day: int = GRID.week_start_day
    pixels_per_hour: float = GRID.pixels_per_hour
    hidden_calendar_ids: List[str] = field(default_factory=list)
    log_level: str = LOGGING.level


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def _int_or(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _float_or(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _normalize(data: Dict[str, Any]) -> AppConfig:
    week_start = _int_or(data.get("week_start_day"), GRID.week_start_day) % 7
    zoom = _float_or(data.get("pixels_per_hour"), GRID.pixels_per_hour)
    zoom = min(max(zoom, GRID.min_pixels_per_hour), GRID.max_pixels_per_hour)
    hidden = data.get("hidden_calendar_ids") or []
    if not isinstance(hidden, list):
        hidden = []
    level = data.get("log_level") or LOGGING.level
    return AppConfig(
        week_start_day=week_start,
        pixels_per_hour=zoom,
        hidden_calendar_ids=[str(x) for x in hidden],
        log_level=str(level).upper(),
    )


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    return _normalize(_load_raw(target))


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    _ensure_parent(target)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    target = path or CONFIG_PATH
    cfg = load_config(target)
    for key, value in changes.items():
        if hasattr(cfg, key):
            setattr(cfg, key, value)
    cfg = _normalize(asdict(cfg))
    save_config(cfg, target)
    return cfg


def toggle_calendar(calendar_id: str, path: Optional[Path] = None) -> AppConfig:
    """Flip one calendar between shown and hidden and persist the result."""
    hidden = list(load_config(path).hidden_calendar_ids)
    if calendar_id in hidden:
        hidden.remove(calendar_id)
    else:
        hidden.append(calendar_id)
    return update_config(path, hidden_calendar_ids=hidden)


__all__ = ["AppConfig", "load_config", "save_config", "toggle_calendar", "update_config"]
