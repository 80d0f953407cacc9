"""Tests for client identity resolution and the admission controller."""

import pytest
from starlette.requests import Request

from recipes_buddy.api.admission import AdmissionController, client_identity


def make_request(headers=None, client=("192.168.1.9", 50000)):
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/recipes/search",
        "headers": raw_headers,
        "client": client,
    })


class TestClientIdentity:
    """Tests for client_identity."""

    def test_first_forwarded_for_entry(self):
        request = make_request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert client_identity(request) == "203.0.113.7"

    def test_forwarded_for_wins_over_real_ip(self):
        request = make_request({"X-Forwarded-For": "203.0.113.7", "X-Real-IP": "198.51.100.2"})
        assert client_identity(request) == "203.0.113.7"

    def test_real_ip_when_no_forwarded_for(self):
        request = make_request({"X-Real-IP": "198.51.100.2"})
        assert client_identity(request) == "198.51.100.2"

    def test_empty_forwarded_for_falls_through(self):
        request = make_request({"X-Forwarded-For": " , 10.0.0.1", "X-Real-IP": "198.51.100.2"})
        assert client_identity(request) == "198.51.100.2"

    def test_connection_address_fallback(self):
        assert client_identity(make_request()) == "192.168.1.9"


class TestAdmissionController:
    """Tests for AdmissionController construction and rejection."""

    def test_defaults(self):
        admission = AdmissionController()

        assert admission.rate == "10/minute"
        assert admission.retry_after == 60
        assert admission.limiter.enabled is True

    def test_disabled(self):
        assert AdmissionController(enabled=False).limiter.enabled is False

    @pytest.mark.parametrize("retry_after", [60, 30])
    def test_reject_body(self, retry_after):
        admission = AdmissionController(retry_after=retry_after)

        response = admission.reject(make_request({"X-Real-IP": "198.51.100.2"}), None)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == str(retry_after)
        assert f"try again in {retry_after} seconds" in response.body.decode()
