"""
Core utilities and modules.

Public API:
    - CaptureState / CaptureEvent: capture lifecycle states and events
    - CaptureStateMachine / next_state: transition table and wrapper
    - StatusReporter: auto-clearing user-facing status text
    - CaptureLifecycleError / PermissionDeniedError: shared exceptions

Usage:
    from core import CaptureEvent, CaptureStateMachine

    machine = CaptureStateMachine()
    machine.apply(CaptureEvent.START_REQUESTED)
"""

from core.errors import CaptureLifecycleError, PermissionDeniedError
from core.state_machine import (
    CaptureEvent,
    CaptureState,
    CaptureStateMachine,
    next_state,
)
from core.status import StatusReporter

__all__ = [
    "CaptureEvent",
    "CaptureLifecycleError",
    "CaptureState",
    "CaptureStateMachine",
    "PermissionDeniedError",
    "StatusReporter",
    "next_state",
]
