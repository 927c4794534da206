"""
HTTP Push Notifier

Posts a JSON description of each saved asset to the configured sync
endpoint with requests.
"""

import logging
from typing import Optional

import requests

from config.settings import PUSH_API_TOKEN, PUSH_ENDPOINT_URL, PUSH_TIMEOUT
from storage.models.asset import Asset
from upload.constants import (
    PUSH_AUTH_SCHEME,
    PUSH_CONTENT_TYPE,
    PUSH_EVENT_ASSET_SAVED,
    PUSH_USER_AGENT,
)
from upload.interfaces.push_interface import PushError, PushNotifierInterface


class HttpPushNotifier(PushNotifierInterface):
    """
    Push notifier for an HTTP sync API.

    Usage:
        notifier = HttpPushNotifier("https://sync.example.com/assets")
        notifier.push(asset)  # raises PushError on failure
    """

    def __init__(
        self,
        endpoint_url: str = PUSH_ENDPOINT_URL,
        api_token: str = PUSH_API_TOKEN,
        timeout: float = PUSH_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            endpoint_url: URL receiving the POST
            api_token: Bearer token (empty = no Authorization header)
            timeout: Request timeout in seconds
            session: HTTP session (injectable for tests)
        """
        self.logger = logging.getLogger(__name__)
        self.endpoint_url = endpoint_url
        self.api_token = api_token
        self.timeout = timeout
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Content-Type": PUSH_CONTENT_TYPE,
            "User-Agent": PUSH_USER_AGENT,
        }
        if self.api_token:
            headers["Authorization"] = f"{PUSH_AUTH_SCHEME} {self.api_token}"
        return headers

    def build_payload(self, asset: Asset) -> dict:
        return {
            "event": PUSH_EVENT_ASSET_SAVED,
            "asset": asset.to_dict(),
        }

    def push(self, asset: Asset) -> None:
        if not self.endpoint_url:
            raise PushError("PUSH_ENDPOINT_URL not configured")

        try:
            response = self.session.post(
                self.endpoint_url,
                json=self.build_payload(asset),
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise PushError(f"Push request failed: {e}") from e

        if not response.ok:
            raise PushError(
                f"Push rejected with HTTP {response.status_code}",
                status_code=response.status_code,
            )

        self.logger.info(f"Pushed to API: {asset.id} (HTTP {response.status_code})")

    def is_available(self) -> bool:
        return bool(self.endpoint_url)

    def close(self) -> None:
        self.session.close()
