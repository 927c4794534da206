"""
Implementations Package

Concrete push notifier implementations.
"""

from upload.implementations.http_push import HttpPushNotifier
from upload.implementations.log_push import LogPushNotifier
from upload.implementations.mock_push import MockPushNotifier

__all__ = [
    "HttpPushNotifier",
    "LogPushNotifier",
    "MockPushNotifier",
]
