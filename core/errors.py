"""
Shared Exception Base

Every package raises its own exception family; they all derive from
CaptureLifecycleError so the service layer can catch "anything ours"
without catching programming errors.
"""


class CaptureLifecycleError(Exception):
    """Base class for all capture lifecycle errors"""
    pass


class PermissionDeniedError(CaptureLifecycleError):
    """
    Location permission was refused.

    Recoverable: the user is prompted again on the next start request.
    """
    pass
