"""
Status Reporter Tests

Tests for advisory status text:
- Auto-clear after the delay
- Sticky messages
- Cancellation on teardown

To run:
    pytest tests/core/test_status.py -v
"""

import threading

import pytest

from core.status import (
    STATUS_PROCESSING,
    STATUS_RECORDING,
    STATUS_SAVED_GALLERY,
    StatusReporter,
)


@pytest.fixture
def reporter():
    status = StatusReporter(clear_delay=0.05)
    yield status
    status.cancel()


@pytest.mark.unit
def test_report_sets_text(reporter):
    reporter.report(STATUS_SAVED_GALLERY)

    assert reporter.text == STATUS_SAVED_GALLERY


@pytest.mark.unit
@pytest.mark.slow
def test_report_clears_after_delay(reporter):
    """Non-sticky messages clear themselves via timer."""
    cleared = threading.Event()
    reporter.on_change = lambda text: cleared.set() if text == "" else None

    reporter.report(STATUS_SAVED_GALLERY)

    assert cleared.wait(timeout=2.0)
    assert reporter.text == ""


@pytest.mark.unit
def test_sticky_report_stays():
    status = StatusReporter(clear_delay=0.01)

    status.report(STATUS_RECORDING, sticky=True)

    assert status._timer is None
    assert status.text == STATUS_RECORDING


@pytest.mark.unit
def test_new_report_replaces_pending_clear():
    """A sticky report cancels the previous message's auto-clear."""
    status = StatusReporter(clear_delay=10.0)
    status.report("Saved to gallery")
    first_timer = status._timer

    status.report(STATUS_RECORDING, sticky=True)

    assert first_timer.finished.is_set()
    assert status.text == STATUS_RECORDING


@pytest.mark.unit
def test_clear_notifies_empty_text():
    status = StatusReporter(clear_delay=10.0)
    changes = []
    status.on_change = changes.append

    status.report("Error")
    status.clear()

    assert changes == ["Error", ""]
    assert status.text == ""


@pytest.mark.unit
def test_cancel_keeps_text_but_stops_timer():
    status = StatusReporter(clear_delay=10.0)
    status.report("Error")

    status.cancel()

    assert status._timer is None
    assert status.text == "Error"


@pytest.mark.unit
def test_callback_error_is_contained():
    status = StatusReporter(clear_delay=10.0)

    def broken(text):
        raise RuntimeError("boom")

    status.on_change = broken
    status.report("Error")
    status.cancel()

    assert status.text == "Error"


@pytest.mark.unit
def test_stale_timer_does_not_clear_newer_message():
    """A timer that already fired for an old message leaves the new one alone."""
    status = StatusReporter(clear_delay=10.0)
    status.report(STATUS_SAVED_GALLERY)
    stale_timer = status._timer

    status.report(STATUS_PROCESSING, sticky=True)
    stale_timer.function(*stale_timer.args)

    assert status.text == STATUS_PROCESSING


@pytest.mark.unit
def test_stale_timer_does_not_clear_next_timed_message():
    status = StatusReporter(clear_delay=10.0)
    changes = []
    status.report(STATUS_SAVED_GALLERY)
    stale_timer = status._timer
    status.report("Error")
    status.on_change = changes.append

    stale_timer.function(*stale_timer.args)

    assert status.text == "Error"
    assert changes == []
    status.cancel()
