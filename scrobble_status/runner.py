from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from .cache import TrackCache, load_cache, save_cache
from .errors import ProfileUpdateError
from .lastfm_client import FetchStatus, TrackSource, fetch_current_track
from .settings import Settings

logger = logging.getLogger(__name__)


class ProfileSink(Protocol):
    def set_description(self, text: str) -> str:
        ...


class TickOutcome(str, Enum):
    FETCH_FAILED = "fetch_failed"
    NO_TRACK = "no_track"
    UNCHANGED_ACTIVE = "unchanged_active"
    UNCHANGED_FALLBACK = "unchanged_fallback"
    CHANGED = "changed"
    PROFILE_UPDATE_FAILED = "profile_update_failed"


def elapsed_minutes(since: datetime, now: datetime) -> int:
    """Whole minutes elapsed from ``since`` to ``now``, rounded down; negative if ``since`` is ahead."""
    return math.floor((now - since).total_seconds() / 60)


def _push(profile: ProfileSink, text: str) -> Optional[str]:
    try:
        return profile.set_description(text)
    except ProfileUpdateError as exc:
        logger.error(
            "Something went wrong setting your profile description: %s (status=%s body=%s)",
            exc,
            exc.status_code,
            exc.body,
        )
        return None


def run_tick(
    settings: Settings,
    fetcher: TrackSource,
    profile: ProfileSink,
    cache_path: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> TickOutcome:
    """Fetch the current track and mirror it (or the fallback) into the profile."""

    cache_path = cache_path or settings.cache_path
    result = fetch_current_track(fetcher, settings.target_user)
    if result.status is FetchStatus.NO_TRACK:
        return TickOutcome.NO_TRACK
    if result.status is FetchStatus.FAILED:
        return TickOutcome.FETCH_FAILED

    track_name = result.track
    cache = load_cache(cache_path)
    now = now or datetime.now(timezone.utc)

    if cache.track_name == track_name:
        logger.info("Track already present. Checking for inactivity....")
        if cache.updated_at is None:
            return TickOutcome.UNCHANGED_ACTIVE

        if elapsed_minutes(cache.updated_at, now) >= settings.fallback_timeout_minutes:
            name = _push(profile, settings.fallback_description)
            if name is None:
                return TickOutcome.PROFILE_UPDATE_FAILED
            logger.info('Fallback due to inactivity. Set profile description to: "%s"', name)
            return TickOutcome.UNCHANGED_FALLBACK

        logger.info("Probably not inactive. Not doing anything")
        return TickOutcome.UNCHANGED_ACTIVE

    name = _push(profile, track_name)
    if name is None:
        return TickOutcome.PROFILE_UPDATE_FAILED
    logger.info('Set profile description to: "%s"', name)

    save_cache(cache_path, TrackCache(track_name=track_name, updated_at=now))
    return TickOutcome.CHANGED
