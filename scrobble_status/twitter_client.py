from __future__ import annotations

import logging

import requests
from requests_oauthlib import OAuth1

from .errors import ProfileUpdateError
from .profile import format_description
from .settings import TwitterCredentials

logger = logging.getLogger(__name__)

UPDATE_PROFILE_URL = "https://api.twitter.com/1.1/account/update_profile.json"


class TwitterProfileClient:
    def __init__(
        self,
        consumer_key: str,
        consumer_secret: str,
        access_token: str,
        access_token_secret: str,
        timeout: float = 15,
        dry_run: bool = False,
    ) -> None:
        self.auth = OAuth1(consumer_key, consumer_secret, access_token, access_token_secret)
        self.timeout = timeout
        self.dry_run = dry_run

    @classmethod
    def from_credentials(
        cls, credentials: TwitterCredentials, timeout: float = 15, dry_run: bool = False
    ) -> "TwitterProfileClient":
        return cls(
            credentials.consumer_key,
            credentials.consumer_secret,
            credentials.access_token,
            credentials.access_token_secret,
            timeout=timeout,
            dry_run=dry_run,
        )

    def set_description(self, text: str) -> str:
        """Push the formatted ``text`` as profile description and return what was sent."""

        description = format_description(text)
        if self.dry_run:
            logger.info("Dry run: would set profile description to %r", description)
            return description

        try:
            response = requests.post(
                UPDATE_PROFILE_URL,
                data={"description": description},
                auth=self.auth,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise ProfileUpdateError(f"Profile update request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise ProfileUpdateError(
                f"Profile update rejected with status {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        return description
