"""
Upload Factory

Factory pattern for creating push notifier implementations.
Follows same pattern as recording/factory.py for consistency.

Automatically configures from environment variables.
"""

import logging
from typing import Literal

from config.settings import PUSH_ENDPOINT_URL
from upload.implementations.http_push import HttpPushNotifier
from upload.implementations.log_push import LogPushNotifier
from upload.implementations.mock_push import MockPushNotifier
from upload.interfaces.push_interface import PushNotifierInterface

# Type alias
PushMode = Literal["auto", "http", "log", "mock"]


class PushNotifierFactory:
    """
    Factory for creating push notifiers.

    Reads configuration from environment variables:
    - PUSH_ENDPOINT_URL: Sync API endpoint
    - PUSH_API_TOKEN: Bearer token for the endpoint

    Usage:
        # Auto-detect from environment (HTTP if configured, log otherwise)
        notifier = PushNotifierFactory.create_notifier()

        # Force mock for testing
        notifier = PushNotifierFactory.create_notifier(mode="mock")
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_notifier(cls, mode: PushMode = "auto") -> PushNotifierInterface:
        """
        Create a push notifier.

        Raises:
            RuntimeError: If mode="http" but PUSH_ENDPOINT_URL is not set
        """
        if mode == "mock":
            cls._logger.info("Creating Mock Push Notifier (forced)")
            return MockPushNotifier()

        if mode == "log":
            cls._logger.info("Creating Log Push Notifier (forced)")
            return LogPushNotifier()

        if mode == "http":
            if not PUSH_ENDPOINT_URL:
                raise RuntimeError("HTTP push requested but PUSH_ENDPOINT_URL not set")
            cls._logger.info("Creating HTTP Push Notifier (forced)")
            return HttpPushNotifier()

        # mode == "auto"
        if PUSH_ENDPOINT_URL:
            cls._logger.info(f"Creating HTTP Push Notifier ({PUSH_ENDPOINT_URL})")
            return HttpPushNotifier()

        cls._logger.info("PUSH_ENDPOINT_URL not set, using Log Push Notifier")
        return LogPushNotifier()


# Convenience function


def create_push_notifier(force_mock: bool = False) -> PushNotifierInterface:
    """Quick notifier creation with auto-detection"""
    return PushNotifierFactory.create_notifier(mode="mock" if force_mock else "auto")
