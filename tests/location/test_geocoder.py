"""
Reverse Geocoder Tests

GoogleGeocoder must never raise: every failure mode yields None.

To run:
    pytest tests/location/test_geocoder.py -v
"""

import pytest
import requests

from location.geocoder import GoogleGeocoder


@pytest.mark.unit
def test_reverse_returns_first_formatted_address(geocoder_factory, ok_response):
    geocoder, session = geocoder_factory(ok_response("1 Main St, Springfield, USA"))

    address = geocoder.reverse(37.422, -122.084)

    assert address == "1 Main St, Springfield, USA"
    call = session.calls[0]
    assert call["params"]["latlng"] == "37.422,-122.084"
    assert call["params"]["key"] == "test-key"
    assert call["timeout"] == geocoder.timeout


@pytest.mark.unit
def test_reverse_http_500_returns_none(geocoder_factory, make_response):
    geocoder, _ = geocoder_factory(make_response(500))

    assert geocoder.reverse(1.0, 2.0) is None


@pytest.mark.unit
def test_reverse_transport_error_returns_none(geocoder_factory, request_timeout):
    geocoder, _ = geocoder_factory(error=request_timeout)

    assert geocoder.reverse(1.0, 2.0) is None


@pytest.mark.unit
def test_reverse_connection_error_returns_none(geocoder_factory):
    geocoder, _ = geocoder_factory(error=requests.ConnectionError("offline"))

    assert geocoder.reverse(1.0, 2.0) is None


@pytest.mark.unit
def test_reverse_invalid_json_returns_none(geocoder_factory, make_response):
    geocoder, _ = geocoder_factory(make_response(200, invalid_json=True))

    assert geocoder.reverse(1.0, 2.0) is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload",
    [
        {"status": "ZERO_RESULTS", "results": []},
        {"status": "REQUEST_DENIED"},
        {"status": "OK", "results": []},
        {"status": "OK", "results": [{}]},
        ["not", "a", "dict"],
    ],
)
def test_reverse_unusable_body_returns_none(geocoder_factory, make_response, payload):
    geocoder, _ = geocoder_factory(make_response(200, payload))

    assert geocoder.reverse(1.0, 2.0) is None


@pytest.mark.unit
def test_reverse_without_api_key_skips_request(make_session, ok_response):
    session = make_session(ok_response("ignored"))
    geocoder = GoogleGeocoder(api_key="", session=session)

    assert geocoder.reverse(1.0, 2.0) is None
    assert session.calls == []
    assert geocoder.is_configured is False


@pytest.mark.unit
def test_close_closes_session(geocoder_factory):
    geocoder, session = geocoder_factory()

    geocoder.close()

    assert session.closed
