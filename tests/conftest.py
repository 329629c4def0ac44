# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from room_relay.api.dependencies.providers import (
    resource_api_dependency,
    token_service_dependency,
)
from room_relay.core.errors import UpstreamError
from room_relay.main import create_app
from room_relay.services.token_service import TokenService


class FakeResourceApi:
    """
    In-memory stand-in for ResourceApiClient.

    `routes` maps a path to either a payload, an exception instance to raise,
    or a callable ``(params_or_json) -> payload``. Every call is recorded.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def _resolve(self, method, path, arg):
        self.calls.append((method, path, arg))
        if path not in self.routes:
            raise UpstreamError(f"{method} {path} not stubbed", status_code=404, body={"message": "not found"})
        route = self.routes[path]
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(arg)
        return route

    async def get_json(self, path, params=None):
        return self._resolve("GET", path, params)

    async def post_json(self, path, json=None):
        return self._resolve("POST", path, json)


@pytest.fixture
def fake_api() -> FakeResourceApi:
    return FakeResourceApi()


@pytest.fixture
def token_service() -> TokenService:
    return TokenService(access_key="access-key-123", app_secret="app-secret-0123456789abcdef0123456789")


@pytest.fixture
def client(fake_api, token_service) -> TestClient:
    """
    TestClient whose Resource API and TokenService are swapped for fakes.
    """
    app = create_app()
    app.dependency_overrides[resource_api_dependency] = lambda: fake_api
    app.dependency_overrides[token_service_dependency] = lambda: token_service
    with TestClient(app) as test_client:
        yield test_client
