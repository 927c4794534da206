"""
Capture State Machine

The capture session lifecycle as an explicit transition table.

    IDLE → RECORDING → FINALIZING → IDLE
             |                       ↑
             +---- (device error) ---+

next_state() is a pure function: given a state and an event it returns the
new state, or None when the event is not accepted in that state. The
CaptureStateMachine wrapper adds history, logging and change notification.
"""

import logging
import time
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple


class CaptureState(Enum):
    IDLE = "idle"
    RECORDING = "recording"
    FINALIZING = "finalizing"


class CaptureEvent(Enum):
    START_REQUESTED = "start_requested"
    START_ABORTED = "start_aborted"  # permission denied or device refused
    STOP_REQUESTED = "stop_requested"
    DEVICE_FINISHED = "device_finished"
    DEVICE_ERROR = "device_error"
    FINALIZE_COMPLETE = "finalize_complete"  # success or failure


TRANSITIONS: Dict[Tuple[CaptureState, CaptureEvent], CaptureState] = {
    (CaptureState.IDLE, CaptureEvent.START_REQUESTED): CaptureState.RECORDING,
    (CaptureState.IDLE, CaptureEvent.START_ABORTED): CaptureState.IDLE,
    (CaptureState.RECORDING, CaptureEvent.STOP_REQUESTED): CaptureState.FINALIZING,
    (CaptureState.RECORDING, CaptureEvent.DEVICE_FINISHED): CaptureState.FINALIZING,
    (CaptureState.RECORDING, CaptureEvent.DEVICE_ERROR): CaptureState.IDLE,
    # Completion after an explicit stop arrives while already finalizing
    (CaptureState.FINALIZING, CaptureEvent.DEVICE_FINISHED): CaptureState.FINALIZING,
    (CaptureState.FINALIZING, CaptureEvent.DEVICE_ERROR): CaptureState.IDLE,
    (CaptureState.FINALIZING, CaptureEvent.FINALIZE_COMPLETE): CaptureState.IDLE,
}


def next_state(state: CaptureState, event: CaptureEvent) -> Optional[CaptureState]:
    """Return the state reached by applying event, or None if rejected"""
    return TRANSITIONS.get((state, event))


class CaptureStateMachine:
    """
    Stateful wrapper around next_state().

    Usage:
        machine = CaptureStateMachine()
        machine.on_state_change = lambda old, new: print(old, new)

        if machine.apply(CaptureEvent.START_REQUESTED):
            ...  # now RECORDING
    """

    MAX_HISTORY = 50

    def __init__(self, initial: CaptureState = CaptureState.IDLE):
        self.logger = logging.getLogger(__name__)
        self.current_state = initial
        self.previous_state: Optional[CaptureState] = None
        self.state_start_time = time.time()
        self.history: List[Tuple[CaptureState, CaptureEvent, CaptureState]] = []

        # Called with (old_state, new_state) after every accepted event
        self.on_state_change: Optional[
            Callable[[CaptureState, CaptureState], None]
        ] = None

    def can_apply(self, event: CaptureEvent) -> bool:
        """Check whether event is accepted in the current state"""
        return next_state(self.current_state, event) is not None

    def apply(self, event: CaptureEvent, reason: str = "") -> bool:
        """
        Apply an event.

        Returns:
            True if the event was accepted (state may be unchanged for
            self-transitions), False if rejected
        """
        target = next_state(self.current_state, event)
        if target is None:
            self.logger.warning(
                f"Event {event.value} rejected in state {self.current_state.value}",
            )
            return False

        old_state = self.current_state
        self.history.append((old_state, event, target))
        if len(self.history) > self.MAX_HISTORY:
            self.history.pop(0)

        if target == old_state:
            self.logger.debug(f"Event {event.value} kept state {old_state.value}")
            return True

        self.previous_state = old_state
        self.current_state = target
        self.state_start_time = time.time()

        log_msg = f"State transition: {old_state.value} -> {target.value}"
        if reason:
            log_msg += f" ({reason})"
        self.logger.info(log_msg)

        if self.on_state_change:
            try:
                self.on_state_change(old_state, target)
            except Exception as e:
                self.logger.error(f"Error in state change callback: {e}")

        return True

    def get_state_duration(self) -> float:
        """Get how long we've been in the current state (seconds)"""
        return time.time() - self.state_start_time

    def get_status_info(self) -> Dict:
        """Get status information for debugging/monitoring"""
        return {
            "current_state": self.current_state.value,
            "previous_state": (
                self.previous_state.value if self.previous_state else None
            ),
            "state_duration": self.get_state_duration(),
            "transitions": len(self.history),
        }
