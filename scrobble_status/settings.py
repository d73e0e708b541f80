from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CACHE_PATH = BASE_DIR / "trackCache.json"

REQUIRED_VARS = (
    "LASTFM_API_KEY",
    "LASTFM_SECRET",
    "LASTFM_TARGET_USER",
    "TWITTER_CONSUMER_KEY",
    "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_TOKEN_KEY",
    "TWITTER_ACCESS_TOKEN_SECRET",
    "FALLBACK_TIMEOUT",
)


@dataclass(frozen=True)
class LastFmCredentials:
    api_key: str
    api_secret: str


@dataclass(frozen=True)
class TwitterCredentials:
    consumer_key: str
    consumer_secret: str
    access_token: str
    access_token_secret: str


@dataclass(frozen=True)
class Settings:
    target_user: str
    lastfm: LastFmCredentials
    twitter: TwitterCredentials
    fallback_description: str
    fallback_timeout_minutes: int
    cache_path: Path
    log_level: str
    http_timeout: float


def _parse_timeout_minutes(value: str) -> int:
    try:
        minutes = int(value.strip())
    except ValueError as exc:
        raise ConfigError(f'Invalid fallback timeout provided: "{value}"') from exc
    if minutes < 0:
        raise ConfigError(f'Invalid fallback timeout provided: "{value}" (must be >= 0)')
    return minutes


def _to_float(name: str, value: Optional[str], default: float) -> float:
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigError(f"Unable to parse {name} from {value!r}") from exc


def load_settings() -> Settings:
    """Load configuration from environment variables (and a local .env file)."""

    missing = [name for name in REQUIRED_VARS if not os.getenv(name)]
    if missing:
        raise ConfigError(
            f"The following environment variables are missing: {', '.join(missing)}",
            missing=missing,
        )

    cache_path = Path(os.getenv("TRACK_CACHE_PATH") or DEFAULT_CACHE_PATH).expanduser()

    return Settings(
        target_user=os.environ["LASTFM_TARGET_USER"],
        lastfm=LastFmCredentials(
            api_key=os.environ["LASTFM_API_KEY"],
            api_secret=os.environ["LASTFM_SECRET"],
        ),
        twitter=TwitterCredentials(
            consumer_key=os.environ["TWITTER_CONSUMER_KEY"],
            consumer_secret=os.environ["TWITTER_CONSUMER_SECRET"],
            access_token=os.environ["TWITTER_ACCESS_TOKEN_KEY"],
            access_token_secret=os.environ["TWITTER_ACCESS_TOKEN_SECRET"],
        ),
        fallback_description=os.getenv("TWITTER_FALLBACK_DESCRIPTION", ""),
        fallback_timeout_minutes=_parse_timeout_minutes(os.environ["FALLBACK_TIMEOUT"]),
        cache_path=cache_path,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        http_timeout=_to_float("HTTP_TIMEOUT", os.getenv("HTTP_TIMEOUT"), 15.0),
    )
