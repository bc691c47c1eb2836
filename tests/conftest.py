"""Pytest shared fixtures for the Keycloak admin client tests."""
import json
import pathlib
import sys
from types import SimpleNamespace
from typing import Any, Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from kcadmin.core.keycloak import KeycloakAdmin, create_client_with_token

BASE_URL = "http://kc.test"
TOKEN_PATH = "/realms/master/protocol/openid-connect/token"


class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, payload: Any = None, headers: Optional[dict] = None,
                 url: str = "", text: Optional[str] = None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.url = url
        if text is not None:
            self.text = text
        elif payload is not None:
            self.text = json.dumps(payload)
        else:
            self.text = ""
        self.content = self.text.encode()

    def json(self):
        # Decode afresh so callers never share or mutate the registered payload
        return json.loads(self.text)


class FakeKeycloak:
    """Routes ``requests.request`` calls to canned responses and records them.

    Responses registered for the same method and path are served in order;
    the last one is repeated.
    """

    def __init__(self, base_url: str = BASE_URL):
        self.base_url = base_url
        self.calls: list[SimpleNamespace] = []
        self._routes: dict[tuple[str, str], list] = {}

    def add(self, method: str, path: str, status: int = 200, payload: Any = None,
            headers: Optional[dict] = None, text: Optional[str] = None, exc: Optional[Exception] = None):
        entry = exc if exc is not None else StubResponse(status, payload, headers, self.base_url + path, text)
        self._routes.setdefault((method, path), []).append(entry)
        return self

    def __call__(self, method: str, url: str, **kwargs):
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        self.calls.append(SimpleNamespace(method=method, url=url, path=path, kwargs=kwargs))
        queue = self._routes.get((method, path))
        if not queue:
            raise AssertionError(f"Unexpected HTTP {method} in unit test: {url}")
        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry
        return entry

    def requests_to(self, method: str, path: str) -> list[SimpleNamespace]:
        return [call for call in self.calls if call.method == method and call.path == path]


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def fake_keycloak(monkeypatch):
    """Replace the HTTP transport with a FakeKeycloak for the test."""
    fake = FakeKeycloak()
    monkeypatch.setattr(requests, "request", fake)
    return fake


@pytest.fixture(autouse=True)
def _block_network(monkeypatch, request):
    """
    Prevent unit tests from reaching a real server.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration") or "fake_keycloak" in request.fixturenames:
        return

    def _refuse(method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected network access in unit test: {method} {url}")

    monkeypatch.setattr(requests, "request", _refuse)


@pytest.fixture()
def kc_client(fake_keycloak):
    """Pre-authenticated connection talking to the fake server."""
    return create_client_with_token(BASE_URL, "test-token")


@pytest.fixture()
def admin(kc_client):
    return KeycloakAdmin(kc_client)
