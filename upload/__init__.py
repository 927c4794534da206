"""
Upload Module

Push/sync notification for newly saved assets.

Public API:
    - PushNotifierInterface: Notifier contract
    - PushError: Push failure
    - PushNotifierFactory / create_push_notifier: Factory

Usage:
    from upload import create_push_notifier

    notifier = create_push_notifier()
    finalizer = AssetFinalizer(filesystem, metadata, push_notifier=notifier)
"""

from upload.factory import PushNotifierFactory, create_push_notifier
from upload.interfaces.push_interface import PushError, PushNotifierInterface

# Public API
__all__ = [
    "PushError",
    "PushNotifierFactory",
    "PushNotifierInterface",
    "create_push_notifier",
]
