"""
Permission Gate Interface

The physical permission dialog is an external collaborator. The capture
session only needs to ask "is location granted?" and, when it is not,
"please ask the user" - synchronously, before recording starts.
"""

from abc import ABC, abstractmethod


class PermissionGateInterface(ABC):
    """Abstract source of the location permission decision"""

    @abstractmethod
    def is_granted(self) -> bool:
        """Current permission state, without prompting"""
        pass

    @abstractmethod
    def request(self) -> bool:
        """
        Prompt for permission.

        Returns:
            True if granted after the prompt
        """
        pass

    def revoke(self) -> None:
        """Record that the permission was revoked (sensor reported denial)"""
        pass
