import json
from typing import Any, NamedTuple, Optional
from urllib.parse import urlsplit

import pytest
import requests
from fastapi import Request
from fastapi.testclient import TestClient

from tourtabs.auth.dependencies import get_api_client, get_public_client, get_session
from tourtabs.core.config import SESSION_COOKIE
from tourtabs.core.security import create_session_token
from tourtabs.main import app
from tourtabs.services.api_client import ApiClient

BACKEND_URL = "http://backend.test"
API_TOKEN = "api-token-123"


class FakeResponse:
    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        if body is None:
            self.text = ""
        elif isinstance(body, str):
            self.text = body
        else:
            self.text = json.dumps(body)
        self.content = self.text.encode()

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        return json.loads(self.text)


class Call(NamedTuple):
    method: str
    path: str
    headers: dict
    json: Any
    params: Optional[dict]
    files: Optional[dict]


class FakeBackend:
    """Stands in for ``requests.Session``: canned responses keyed by method and path."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method: str, path: str, body: Any = None, status: int = 200):
        self.routes[(method, path)] = (status, body)

    def fail(self, method: str, path: str, error: Exception):
        self.routes[(method, path)] = (None, error)

    def request(self, method, url, headers=None, json=None, params=None, files=None, timeout=None):
        path = urlsplit(url).path
        self.calls.append(Call(method, path, headers or {}, json, params, files))

        if (method, path) not in self.routes:
            return FakeResponse(404, {"message": "Not found"})
        status, body = self.routes[(method, path)]
        if isinstance(body, Exception):
            raise body
        return FakeResponse(status, body)

    def calls_to(self, method: str, path: str):
        return [c for c in self.calls if c.method == method and c.path == path]

    def last(self, method: str, path: str) -> Call:
        calls = self.calls_to(method, path)
        assert calls, f"no {method} {path} request was made"
        return calls[-1]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def api(backend):
    return ApiClient(token=API_TOKEN, base_url=BACKEND_URL, session=backend)


@pytest.fixture
def client(backend):
    def api_client(request: Request) -> ApiClient:
        session = get_session(request)
        return ApiClient(token=session["api_token"], base_url=BACKEND_URL, session=backend)

    def public_client() -> ApiClient:
        return ApiClient(base_url=BACKEND_URL, session=backend)

    app.dependency_overrides[get_api_client] = api_client
    app.dependency_overrides[get_public_client] = public_client
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def logged_in(client):
    client.cookies.set(SESSION_COOKIE, create_session_token(API_TOKEN, "Admin"))
    return client


@pytest.fixture
def network_down():
    return requests.ConnectionError("connection refused")


def tour(tour_id: int, **fields) -> dict:
    data = {
        "id": tour_id,
        "title": f"Tour {tour_id}",
        "tour_code": f"T{tour_id:03d}",
        "country": {"id": 392, "name": "ญี่ปุ่น"},
        "days": 5,
        "nights": 4,
        "price": 29900,
        "departure_date": "2026-04-13T00:00:00.000000Z",
    }
    data.update(fields)
    return data


def tab(tab_id: int = 1, **fields) -> dict:
    data = {
        "id": tab_id,
        "name": "ทัวร์ยอดนิยม",
        "slug": "popular",
        "badge_text": None,
        "badge_color": "orange",
        "display_modes": ["tab"],
        "conditions": [],
        "display_limit": 12,
        "sort_by": "popular",
        "sort_order": 0,
        "is_active": True,
    }
    data.update(fields)
    return data


def festival(festival_id: Optional[int] = 1, **fields) -> dict:
    data = {
        "id": festival_id,
        "name": "สงกรานต์",
        "slug": "songkran",
        "start_date": "2026-04-13",
        "end_date": "2026-04-15",
        "badge_text": "สงกรานต์",
        "badge_color": "blue",
        "display_modes": ["card", "period"],
        "is_active": True,
        "sort_order": 0,
    }
    data.update(fields)
    return data


CONDITION_OPTIONS = {
    "countries": [
        {"id": 392, "name_en": "Japan", "name_th": "ญี่ปุ่น", "iso2": "JP"},
        {"id": 764, "name_en": "Thailand", "name_th": None, "iso2": "TH"},
    ],
    "regions": {"asia": "เอเชีย", "europe": "ยุโรป"},
    "wholesalers": [{"id": 7, "name": "Go Holiday", "code": "GH"}],
    "tour_types": {"join": "จอยทัวร์", "private": "ทัวร์ส่วนตัว"},
    "condition_types": [],
    "sort_options": [],
    "display_modes": [],
}
