"""
Interfaces Package

Abstract interfaces for push implementations.
"""

from upload.interfaces.push_interface import PushError, PushNotifierInterface

__all__ = [
    "PushError",
    "PushNotifierInterface",
]
