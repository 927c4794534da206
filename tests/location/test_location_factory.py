"""
Location Factory Tests

Provider selection in auto and forced modes.

To run:
    pytest tests/location/test_location_factory.py -v
"""

import pytest

import location.factory as location_factory
from location.enricher import GeolocationEnricher
from location.factory import LocationFactory, create_position_provider
from location.implementations.fixed_position import FixedPositionProvider
from location.implementations.mock_position import MockPositionProvider
from location.implementations.no_position import NoPositionProvider
from location.interfaces.position_interface import PositionUnavailable
from location.models import PositionRequest, TimestampOnly


@pytest.fixture
def no_location_hardware(monkeypatch, tmp_path):
    """No serial GPS port and no fixed coordinates configured"""
    monkeypatch.setattr(location_factory, "GPS_SERIAL_PORT", str(tmp_path / "ttyUSB9"))
    monkeypatch.setattr(location_factory, "FIXED_LATITUDE", "")
    monkeypatch.setattr(location_factory, "FIXED_LONGITUDE", "")


@pytest.mark.unit
def test_auto_without_gps_or_fixed_has_no_fix(no_location_hardware):
    provider = create_position_provider()

    assert isinstance(provider, NoPositionProvider)
    assert provider.is_available() is False
    with pytest.raises(PositionUnavailable):
        provider.get_current_position(PositionRequest())


@pytest.mark.unit
def test_auto_without_gps_tags_timestamp_only(no_location_hardware, permission_gate):
    enricher = GeolocationEnricher(create_position_provider(), permission_gate)

    result = enricher.poll()

    assert isinstance(result, TimestampOnly)
    assert enricher.latest_tag is None


@pytest.mark.unit
def test_auto_uses_fixed_coordinates(no_location_hardware, monkeypatch):
    monkeypatch.setattr(location_factory, "FIXED_LATITUDE", "37.422")
    monkeypatch.setattr(location_factory, "FIXED_LONGITUDE", "-122.084")

    provider = LocationFactory.create_provider()

    assert isinstance(provider, FixedPositionProvider)
    assert provider.latitude == pytest.approx(37.422)


@pytest.mark.unit
def test_only_mock_mode_returns_mock(no_location_hardware):
    assert isinstance(create_position_provider(force_mock=True), MockPositionProvider)
    assert not isinstance(LocationFactory.create_provider(mode="auto"), MockPositionProvider)


@pytest.mark.unit
def test_forced_serial_without_port_raises(no_location_hardware):
    with pytest.raises(RuntimeError):
        LocationFactory.create_provider(mode="serial")
