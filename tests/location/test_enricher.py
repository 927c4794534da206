"""
Geolocation Enricher Tests

Tests for GeolocationEnricher showing:
- Poll results (tag, coordinates only, timestamp only)
- Poll never raises
- Permission revocation
- configure() and the polling lifecycle

To run:
    pytest tests/location/test_enricher.py -v
"""

import threading

import pytest

from location.enricher import GeolocationEnricher
from location.geocoder import GoogleGeocoder
from location.interfaces.position_interface import (
    PositionPermissionDenied,
    PositionTimeout,
    PositionUnavailable,
)
from location.models import LocationTag, Position, TimestampOnly, format_overlay

# =============================================================================
# POLL TESTS
# =============================================================================


@pytest.mark.unit
def test_poll_returns_location_tag(enricher):
    result = enricher.poll()

    assert isinstance(result, LocationTag)
    assert result.latitude == pytest.approx(48.8584)
    assert result.longitude == pytest.approx(2.2945)
    assert result.address is None
    assert enricher.latest_tag == result


@pytest.mark.unit
def test_poll_with_geocoder_sets_address(
    position_provider, permission_gate, make_session, ok_response,
):
    session = make_session(ok_response("5 Avenue Anatole France, 75007 Paris, France"))
    geocoder = GoogleGeocoder(api_key="key", session=session)
    enricher = GeolocationEnricher(position_provider, permission_gate, geocoder=geocoder)

    result = enricher.poll()

    assert result.address == "5 Avenue Anatole France, 75007 Paris, France"
    assert result.display_text.splitlines() == [
        "5 Avenue Anatole France",
        "75007 Paris",
        "France",
        "Lat: 48.858400",
        "Lon: 2.294500",
    ]


@pytest.mark.unit
def test_poll_geocoder_500_keeps_coordinates(
    position_provider, permission_gate, make_session, make_response,
):
    """Reverse geocoding failure degrades to a coordinate-only tag."""
    session = make_session(make_response(500))
    geocoder = GoogleGeocoder(api_key="key", session=session)
    enricher = GeolocationEnricher(position_provider, permission_gate, geocoder=geocoder)

    result = enricher.poll()

    assert isinstance(result, LocationTag)
    assert result.address is None
    assert result.display_text == "Lat: 48.858400\nLon: 2.294500"


@pytest.mark.unit
@pytest.mark.parametrize(
    "error",
    [PositionTimeout("no fix"), PositionUnavailable("unplugged")],
)
def test_poll_position_error_returns_timestamp_only(enricher, position_provider, error):
    position_provider.fail_with(error)

    result = enricher.poll()

    assert isinstance(result, TimestampOnly)
    assert enricher.latest_tag is None


@pytest.mark.unit
def test_poll_failure_keeps_previous_tag(enricher, position_provider):
    first = enricher.poll()
    position_provider.fail_with(PositionTimeout("no fix"))

    second = enricher.poll()

    assert isinstance(second, TimestampOnly)
    assert enricher.latest_tag == first


@pytest.mark.unit
def test_poll_never_raises_on_unexpected_error(enricher, position_provider):
    def broken(request):
        raise RuntimeError("driver bug")

    position_provider.get_current_position = broken

    result = enricher.poll()

    assert isinstance(result, TimestampOnly)


@pytest.mark.unit
def test_poll_disabled_returns_timestamp_only(position_provider, permission_gate):
    enricher = GeolocationEnricher(position_provider, permission_gate, enabled=False)

    result = enricher.poll()

    assert isinstance(result, TimestampOnly)
    assert position_provider.requests == []


@pytest.mark.unit
def test_poll_without_permission_skips_provider(position_provider):
    from location.implementations.permission_gates import MockPermissionGate

    enricher = GeolocationEnricher(position_provider, MockPermissionGate(granted=False))

    result = enricher.poll()

    assert isinstance(result, TimestampOnly)
    assert position_provider.requests == []


@pytest.mark.unit
def test_poll_notifies_on_update(enricher):
    updates = []
    enricher.on_update = updates.append

    result = enricher.poll()

    assert updates == [result]


# =============================================================================
# PERMISSION TESTS
# =============================================================================


@pytest.mark.unit
def test_permission_denied_revokes_gate(enricher, position_provider, permission_gate):
    revoked = []
    enricher.on_permission_revoked = lambda: revoked.append(True)
    position_provider.fail_with(PositionPermissionDenied("revoked"))

    result = enricher.poll()

    assert isinstance(result, TimestampOnly)
    assert permission_gate.is_granted() is False
    assert permission_gate.events == ["revoke"]
    assert revoked == [True]


# =============================================================================
# CONFIGURE / LIFECYCLE TESTS
# =============================================================================


@pytest.mark.unit
def test_configure_disable_forgets_tag(enricher):
    enricher.poll()

    enricher.configure(False)

    assert enricher.enabled is False
    assert enricher.latest_tag is None


@pytest.mark.unit
@pytest.mark.slow
def test_start_polls_immediately_and_stop_halts(enricher, position_provider):
    polled = threading.Event()
    enricher.on_update = lambda result: polled.set()

    enricher.start()
    assert polled.wait(timeout=2.0)
    assert enricher.is_polling

    enricher.stop()
    assert not enricher.is_polling


@pytest.mark.unit
def test_start_when_disabled_does_not_poll(position_provider, permission_gate):
    enricher = GeolocationEnricher(position_provider, permission_gate, enabled=False)

    enricher.start()

    assert not enricher.is_polling
    enricher.stop()


@pytest.mark.unit
@pytest.mark.slow
def test_configure_enable_resumes_started_enricher(position_provider, permission_gate):
    enricher = GeolocationEnricher(
        position_provider, permission_gate, interval=0.05, enabled=False,
    )
    enricher.start()

    enricher.configure(True)

    assert enricher.is_polling
    enricher.stop()


@pytest.mark.unit
def test_stop_without_start_is_safe(enricher):
    enricher.stop()
    enricher.stop()

    assert not enricher.is_polling


# =============================================================================
# MODEL TESTS
# =============================================================================


@pytest.mark.unit
def test_format_overlay_with_tag(enricher):
    tag = enricher.poll()

    lines = format_overlay(tag).splitlines()

    assert lines[0] == tag.resolved_at.strftime("%Y-%m-%d %H:%M:%S")
    assert lines[1:] == ["Lat: 48.858400", "Lon: 2.294500"]


@pytest.mark.unit
def test_format_overlay_timestamp_only():
    result = TimestampOnly()

    assert format_overlay(result) == result.resolved_at.strftime("%Y-%m-%d %H:%M:%S")


@pytest.mark.unit
def test_location_tag_dict_round_trip():
    tag = LocationTag(latitude=1.5, longitude=-2.25, address="Somewhere")

    restored = LocationTag.from_dict(tag.to_dict(), resolved_at=tag.resolved_at)

    assert restored == tag


@pytest.mark.unit
def test_mock_provider_queue_order(position_provider):
    from location.models import PositionRequest

    position_provider.queue(Position(10.0, 20.0))

    first = position_provider.get_current_position(PositionRequest())
    second = position_provider.get_current_position(PositionRequest())

    assert (first.latitude, first.longitude) == (10.0, 20.0)
    assert second.latitude == pytest.approx(48.8584)
