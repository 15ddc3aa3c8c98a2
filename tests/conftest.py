"""Shared fakes for booking API calls."""
import json

import pytest

from session import MemorySession


class FakeResponse:
    def __init__(self, status_code, body=None):
        self.status_code = status_code
        self._body = body

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class FakeHttp:
    """Records calls instead of hitting the network."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def _call(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response

    def post(self, url, **kwargs):
        return self._call("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._call("GET", url, **kwargs)


@pytest.fixture
def logged_in_session():
    return MemorySession(
        cookies={"auth_token": "tok-123"},
        storage={"user_data": json.dumps({"user_id": "u1", "name": "Ada"})},
    )


@pytest.fixture
def created_http():
    return FakeHttp(FakeResponse(201, {"data": {"id": "b1"}}))
