from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import CacheReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackCache:
    """Last track pushed to the profile and when that push happened."""

    track_name: Optional[str] = None
    updated_at: Optional[datetime] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "trackName": self.track_name,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


EMPTY_CACHE = TrackCache()


def parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _read_cache_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise CacheReadError(f"Cache file not found at {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CacheReadError(f"Unable to read cache file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CacheReadError(f"Cache file {path} does not hold a JSON object")
    return data


def load_cache(path: Path) -> TrackCache:
    try:
        data = _read_cache_file(path)
    except CacheReadError as exc:
        logger.debug("Starting with an empty cache: %s", exc)
        return EMPTY_CACHE

    track_name = data.get("trackName")
    if not isinstance(track_name, str):
        track_name = None
    return TrackCache(track_name=track_name, updated_at=parse_timestamp(data.get("updatedAt")))


def save_cache(path: Path, cache: TrackCache) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cache.to_json()), encoding="utf-8")


def clear_cache(path: Path) -> bool:
    if not path.exists():
        return False
    path.unlink()
    return True
