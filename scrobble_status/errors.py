from __future__ import annotations

from typing import Optional, Sequence


class ScrobbleStatusError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(ScrobbleStatusError):
    def __init__(self, message: str, missing: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.missing = list(missing)


class NoTrackError(ScrobbleStatusError):
    """Last.fm answered but the user has no recent tracks."""


class FetchError(ScrobbleStatusError):
    """Network or service failure while looking up the current track."""


class ProfileUpdateError(ScrobbleStatusError):
    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class CacheReadError(ScrobbleStatusError):
    """Cache file is missing or unreadable. Callers treat this as an empty cache."""
