from __future__ import annotations

from typing import Any, Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from spaceapi.facility import build_metalab_template
from spaceapi.main import app, get_state_source
from spaceapi.models import StatusDocument
from spaceapi.state_client import StateSource, StatusMapping, map_status_field

UPSTREAM_URL = "http://upstream.test/status.json"


@pytest.fixture
def template() -> StatusDocument:
    return build_metalab_template()


@pytest.fixture
def seen_requests() -> List[httpx.Request]:
    return []


@pytest.fixture
def make_source(seen_requests: List[httpx.Request]) -> Callable[..., StateSource]:
    """Build a ``StateSource`` whose upstream always answers with *body*.

    *body* may be a dict (sent as JSON), a string (sent raw), or an exception
    instance which is raised instead of answering.
    """

    def _make(body: Any, status_code: int = 200, mapping: StatusMapping = map_status_field) -> StateSource:
        def handler(request: httpx.Request) -> httpx.Response:
            seen_requests.append(request)
            if isinstance(body, Exception):
                raise body
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body)

        return StateSource(UPSTREAM_URL, timeout=1.0, mapping=mapping, transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def client_for(make_source: Callable[..., StateSource]):
    """Return a ``TestClient`` whose upstream answers with the given body."""

    def _client(body: Any, status_code: int = 200) -> TestClient:
        source = make_source(body, status_code)
        app.dependency_overrides[get_state_source] = lambda: source
        return TestClient(app)

    yield _client
    app.dependency_overrides.clear()
