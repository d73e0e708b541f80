from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import pytest

from scrobble_status.errors import NoTrackError, ProfileUpdateError
from scrobble_status.profile import format_description
from scrobble_status.settings import LastFmCredentials, Settings, TwitterCredentials

ENV = {
    "LASTFM_API_KEY": "lfm-key",
    "LASTFM_SECRET": "lfm-secret",
    "LASTFM_TARGET_USER": "someone",
    "TWITTER_CONSUMER_KEY": "ck",
    "TWITTER_CONSUMER_SECRET": "cs",
    "TWITTER_ACCESS_TOKEN_KEY": "at",
    "TWITTER_ACCESS_TOKEN_SECRET": "ats",
    "FALLBACK_TIMEOUT": "10",
}

OPTIONAL_ENV = (
    "TWITTER_FALLBACK_DESCRIPTION",
    "TRACK_CACHE_PATH",
    "LOG_LEVEL",
    "HTTP_TIMEOUT",
)


class FakeFetcher:
    def __init__(self, track: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.track = track
        self.error = error
        self.calls: List[str] = []

    def current_track(self, user: str) -> str:
        self.calls.append(user)
        if self.error is not None:
            raise self.error
        if self.track is None:
            raise NoTrackError("No Track found")
        return self.track


class FakeProfile:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.pushed: List[str] = []

    def set_description(self, text: str) -> str:
        if self.fail:
            raise ProfileUpdateError("boom", status_code=503, body="over capacity")
        description = format_description(text)
        self.pushed.append(description)
        return description


def make_settings(cache_path: Path, timeout: int = 10, fallback: str = "Nothing playing") -> Settings:
    return Settings(
        target_user="someone",
        lastfm=LastFmCredentials(api_key="lfm-key", api_secret="lfm-secret"),
        twitter=TwitterCredentials(
            consumer_key="ck",
            consumer_secret="cs",
            access_token="at",
            access_token_secret="ats",
        ),
        fallback_description=fallback,
        fallback_timeout_minutes=timeout,
        cache_path=cache_path,
        log_level="INFO",
        http_timeout=15.0,
    )


@pytest.fixture
def cache_path(tmp_path: Path) -> Path:
    return tmp_path / "trackCache.json"


@pytest.fixture
def settings(cache_path: Path) -> Settings:
    return make_settings(cache_path)


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch, cache_path: Path) -> dict:
    for name in OPTIONAL_ENV:
        monkeypatch.delenv(name, raising=False)
    for name, value in ENV.items():
        monkeypatch.setenv(name, value)
    monkeypatch.setenv("TRACK_CACHE_PATH", str(cache_path))
    return dict(ENV, TRACK_CACHE_PATH=str(cache_path))
