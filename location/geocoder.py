"""
Reverse Geocoder

Resolves coordinates to a human-readable address using the Google
Geocoding API. Best-effort: every failure (no API key, HTTP error status,
transport error, malformed body, non-OK API status) returns None and is
logged - it never raises to the caller.
"""

import logging
from typing import Optional

import requests

from config.settings import GEOCODE_TIMEOUT, GEOCODE_URL, GOOGLE_MAPS_API_KEY


class GoogleGeocoder:
    """
    Google Geocoding API client.

    Usage:
        geocoder = GoogleGeocoder(api_key="...")
        address = geocoder.reverse(37.422, -122.084)
        if address is None:
            ...  # fall back to coordinates
    """

    def __init__(
        self,
        api_key: str = GOOGLE_MAPS_API_KEY,
        url: str = GEOCODE_URL,
        timeout: float = GEOCODE_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            api_key: Google Maps API key (empty = geocoding disabled)
            url: Geocoding endpoint
            timeout: Request timeout in seconds
            session: HTTP session (injectable for tests)
        """
        self.logger = logging.getLogger(__name__)
        self.api_key = api_key
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

        if not api_key:
            self.logger.warning(
                "GOOGLE_MAPS_API_KEY not set - addresses will not be resolved",
            )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def reverse(self, latitude: float, longitude: float) -> Optional[str]:
        """
        Resolve coordinates to the first formatted address.

        Returns:
            Address string, or None when unavailable
        """
        if not self.api_key:
            return None

        try:
            response = self.session.get(
                self.url,
                params={
                    "latlng": f"{latitude},{longitude}",
                    "key": self.api_key,
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            self.logger.warning(f"Reverse geocoding request failed: {e}")
            return None

        if not response.ok:
            self.logger.warning(
                f"Reverse geocoding HTTP error: status {response.status_code}",
            )
            return None

        try:
            data = response.json()
        except ValueError as e:
            self.logger.warning(f"Reverse geocoding returned invalid JSON: {e}")
            return None

        if not isinstance(data, dict) or data.get("status") != "OK":
            status = data.get("status") if isinstance(data, dict) else None
            self.logger.info(f"No address for {latitude:.6f},{longitude:.6f} ({status})")
            return None

        results = data.get("results") or []
        if not results:
            return None

        address = results[0].get("formatted_address")
        return address or None

    def close(self) -> None:
        self.session.close()
