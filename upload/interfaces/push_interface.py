"""
Push Notifier Interface

Abstract interface for the push/sync collaborator notified after an
asset is saved. The finalizer calls push() fire-and-forget: a failure
is logged and reported, and never affects the saved asset.
"""

from abc import ABC, abstractmethod

from core.errors import CaptureLifecycleError
from storage.models.asset import Asset


class PushNotifierInterface(ABC):
    """
    Abstract base class for push notifiers.

    Any notifier implementation (HTTP API, log only, message queue, etc.)
    must implement these methods.
    """

    @abstractmethod
    def push(self, asset: Asset) -> None:
        """
        Announce a newly saved asset.

        Raises:
            PushError: If the collaborator could not be notified
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the notifier is configured and can push"""

    def close(self) -> None:
        """Release resources (sessions, connections)"""


class PushError(CaptureLifecycleError):
    """
    Exception raised when a push fails.

    Examples:
    - Endpoint not configured
    - Network error
    - Non-2xx response
    """

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code
