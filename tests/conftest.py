"""
Test Configuration
------------------
Shared fixtures: an in-memory HTTP session so no test touches the network.
"""

import json
import sys
from pathlib import Path

import pytest
import requests

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from appintheair_api_client import AppInTheAirClient  # noqa: E402


CLIENT_ID = "client_id"
CLIENT_SECRET = "client_secret"


def make_response(status=200, body=None, content_type="application/json", text=None):
    """Build a real requests.Response without any I/O."""
    response = requests.Response()
    response.status_code = status
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(body if body is not None else {}).encode("utf-8")
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    response.encoding = "utf-8"
    return response


class FakeSession:
    """Stands in for requests.Session; replays queued responses in order."""

    def __init__(self):
        self.calls = []
        self._responses = []

    def queue(self, response):
        self._responses.append(response)
        return self

    def request(self, method, url, headers=None, timeout=None, **kwargs):
        self.calls.append(
            {"method": method, "url": url, "headers": headers, "timeout": timeout}
        )
        if not self._responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        result = self._responses.pop(0)
        if isinstance(result, Exception):
            raise result
        return result

    @property
    def last_url(self):
        return self.calls[-1]["url"]

    @property
    def last_headers(self):
        return self.calls[-1]["headers"]


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return AppInTheAirClient(
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        session=session,
    )


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    """Fail loudly if anything bypasses the fake session."""
    def _blocked(*args, **kwargs):
        raise RuntimeError("Network access is forbidden during tests.")

    monkeypatch.setattr(requests, "request", _blocked)
