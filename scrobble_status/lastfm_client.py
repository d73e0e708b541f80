from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Protocol

import requests

from .errors import FetchError, NoTrackError
from .settings import LastFmCredentials

logger = logging.getLogger(__name__)

API_URL = "https://ws.audioscrobbler.com/2.0/"


class FetchStatus(str, Enum):
    OK = "ok"
    NO_TRACK = "no_track"
    FAILED = "failed"


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus
    track: Optional[str] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is FetchStatus.OK


class TrackSource(Protocol):
    def current_track(self, user: str) -> str:
        ...


def _first_track(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    recent = payload.get("recenttracks")
    if recent is None:
        return None
    if not isinstance(recent, dict):
        raise FetchError("Unexpected Last.fm payload")

    tracks = recent.get("track")
    # Last.fm collapses a one-item list into a bare object.
    if isinstance(tracks, list):
        track = tracks[0] if tracks else None
    else:
        track = tracks
    if track is None:
        return None
    if not isinstance(track, dict):
        raise FetchError("Unexpected Last.fm payload")
    return track


def track_string(track: Dict[str, Any]) -> str:
    name = track.get("name")
    if not isinstance(name, str) or not name.strip():
        raise FetchError("Last.fm track has no name")
    artist = track.get("artist") or {}
    if isinstance(artist, dict):
        artist_name = artist.get("#text") or ""
    elif isinstance(artist, str):
        artist_name = artist
    else:
        raise FetchError("Unexpected Last.fm payload")
    return f"{artist_name} - {name}"


class LastFmClient:
    def __init__(self, api_key: str, api_secret: str = "", timeout: float = 15) -> None:
        self.api_key = api_key
        # Read-only calls are unsigned; the secret is kept for parity with the credentials.
        self.api_secret = api_secret
        self.timeout = timeout

    @classmethod
    def from_credentials(cls, credentials: LastFmCredentials, timeout: float = 15) -> "LastFmClient":
        return cls(credentials.api_key, credentials.api_secret, timeout=timeout)

    def recent_tracks(self, user: str, limit: int = 1) -> Dict[str, Any]:
        params = {
            "method": "user.getrecenttracks",
            "user": user,
            "api_key": self.api_key,
            "format": "json",
            "limit": limit,
        }
        try:
            response = requests.get(API_URL, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise FetchError(str(exc)) from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError(f"Invalid JSON from Last.fm (status {response.status_code})") from exc

        if isinstance(data, dict) and "error" in data:
            raise FetchError(f"Last.fm error {data.get('error')}: {data.get('message', '')}")
        if not 200 <= response.status_code < 300:
            raise FetchError(f"Last.fm responded with status {response.status_code}")
        if not isinstance(data, dict):
            raise FetchError("Unexpected Last.fm payload")
        return data

    def current_track(self, user: str) -> str:
        track = _first_track(self.recent_tracks(user))
        if not track:
            raise NoTrackError("No Track found")
        return track_string(track)


def fetch_current_track(source: TrackSource, user: str) -> FetchResult:
    """Resolve the current track to a FetchResult; never raises lookup errors."""

    try:
        track = source.current_track(user)
    except NoTrackError as exc:
        logger.warning("No recent track for %s: %s", user, exc)
        return FetchResult(FetchStatus.NO_TRACK, reason=str(exc))
    except FetchError as exc:
        logger.error("Something went wrong getting the current track: %s", exc)
        return FetchResult(FetchStatus.FAILED, reason=str(exc))
    return FetchResult(FetchStatus.OK, track=track)
