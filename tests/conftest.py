"""Shared fixtures for FPL Gateway test suite."""
import json
import os
import sys
from collections import defaultdict, deque

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import httpx
import pytest
from fastapi.testclient import TestClient

from main import ProxyConfig, ResponseCache, create_app


UPSTREAM_PREFIX = "/api"  # path component of the default FPL base URL


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeUpstream:
    """
    Scripted FPL API behind httpx.MockTransport.

    Routes are keyed by upstream path including any query string, e.g.
    "/leagues-classic/5/standings/?page_standings=1". Several responses
    queued for one path are served in order; the last one repeats.
    """

    def __init__(self):
        self.routes = defaultdict(deque)
        self.requests = []

    def add(self, path, body=None, status=200, content=None):
        if content is None:
            content = json.dumps(body if body is not None else {}).encode()
        self.routes[path].append(("response", status, content))
        return self

    def raise_on(self, path, exc_type=httpx.ConnectError):
        self.routes[path].append(("raise", exc_type, None))
        return self

    @property
    def paths(self):
        return [self._key(r) for r in self.requests]

    def _key(self, request):
        raw = request.url.raw_path.decode()
        assert raw.startswith(UPSTREAM_PREFIX)
        return raw[len(UPSTREAM_PREFIX):]

    def handler(self, request):
        self.requests.append(request)
        queue = self.routes.get(self._key(request))
        if not queue:
            return httpx.Response(404, json={"detail": "Not found."})
        kind, first, content = queue[0] if len(queue) == 1 else queue.popleft()
        if kind == "raise":
            raise first("upstream unreachable", request=request)
        return httpx.Response(first, content=content, headers={"Content-Type": "application/json"})


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_client(upstream):
    """Factory for a TestClient over a gateway app wired to the fake upstream."""
    clients = []

    def _make(response_cache=None, **config_overrides):
        config = ProxyConfig(**config_overrides)
        app = create_app(
            config,
            transport=httpx.MockTransport(upstream.handler),
            response_cache=response_cache if response_cache is not None else ResponseCache(),
        )
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def make_fixture():
    """Factory for creating fixture dicts matching FPL API shape."""
    def _make(**overrides):
        base = {
            "id": 1,
            "event": 10,
            "team_h": 1,
            "team_a": 2,
            "team_h_difficulty": 3,
            "team_a_difficulty": 4,
            "finished": False,
            "kickoff_time": "2099-01-01T15:00:00Z",
        }
        base.update(overrides)
        return base
    return _make


@pytest.fixture
def make_event():
    """Factory for creating gameweek event dicts."""
    def _make(**overrides):
        base = {
            "id": 1,
            "name": "Gameweek 1",
            "deadline_time": "2024-08-16T17:30:00Z",
            "finished": False,
            "is_current": False,
            "is_next": False,
        }
        base.update(overrides)
        return base
    return _make
