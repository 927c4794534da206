"""
Location Test Configuration and Fixtures

Shared fixtures for location module tests: scripted position provider,
permission gate and a fake HTTP session for the geocoder.
"""

import pytest
import requests

from location.enricher import GeolocationEnricher
from location.geocoder import GoogleGeocoder
from location.implementations.mock_position import MockPositionProvider
from location.implementations.permission_gates import MockPermissionGate


class FakeResponse:
    """Minimal stand-in for requests.Response"""

    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._invalid_json:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeSession:
    """
    Records GET calls and answers with a scripted response or exception.

    Usage:
        session = FakeSession(FakeResponse(500))
        session = FakeSession(error=requests.Timeout("slow"))
    """

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(200, {"status": "ZERO_RESULTS"})
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


def geocode_ok(address):
    return FakeResponse(
        200,
        {"status": "OK", "results": [{"formatted_address": address}]},
    )


# =============================================================================
# PROVIDER / GATE FIXTURES
# =============================================================================


@pytest.fixture
def position_provider():
    """MockPositionProvider at a fixed default position (48.8584, 2.2945)."""
    return MockPositionProvider()


@pytest.fixture
def permission_gate():
    """Granted permission gate."""
    return MockPermissionGate(granted=True)


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def geocoder_factory():
    """
    Build a GoogleGeocoder with a fake session.

    Usage:
        def test_x(geocoder_factory):
            geocoder, session = geocoder_factory(FakeResponse(500))
    """

    def _make(response=None, error=None):
        session = FakeSession(response=response, error=error)
        return GoogleGeocoder(api_key="test-key", session=session), session

    return _make


@pytest.fixture
def enricher(position_provider, permission_gate):
    """
    Enricher without a geocoder, never started.

    Tests drive it with enricher.poll() for determinism.
    """
    instance = GeolocationEnricher(position_provider, permission_gate, interval=0.05)
    yield instance
    instance.stop()


@pytest.fixture
def request_timeout():
    return requests.Timeout("timed out")


@pytest.fixture
def make_response():
    """FakeResponse class (status_code, payload, invalid_json)."""
    return FakeResponse


@pytest.fixture
def make_session():
    """FakeSession class (response, error)."""
    return FakeSession


@pytest.fixture
def ok_response():
    """Build a successful geocoding response for an address."""
    return geocode_ok
