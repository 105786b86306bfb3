"""
Test configuration and fixtures.
"""
from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.config.settings import Settings
from app.client.storage import SharedStorage
from app.routers.zalo import get_relay_service
from app.services.relay_service import RelayService
from app.services.zalo_client import ZaloClient


class ProviderStub:
    """Stands in for Zalo; records every request it receives."""

    def __init__(self, handler: Callable):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def make_settings(**overrides) -> Settings:
    values = {
        "zalo_app_id": "test-app",
        "zalo_secret_key": "test-secret",
        "redirect_uri": "http://localhost:3000/",
        "zalo_egress_proxies": [],
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def client():
    """Test client fixture."""
    return TestClient(app)


@pytest.fixture
def test_settings():
    """Test settings fixture."""
    return make_settings()


@pytest.fixture
def shared_storage():
    return SharedStorage()


@pytest.fixture
def install_provider(test_settings):
    """Route the relays' outbound calls to a ``ProviderStub``."""

    def _install(handler: Callable, settings: Settings = None) -> ProviderStub:
        stub = ProviderStub(handler)
        cfg = settings or test_settings
        app.dependency_overrides[get_relay_service] = lambda: RelayService(
            settings=cfg,
            zalo_client=ZaloClient(cfg, transport=stub.transport),
        )
        return stub

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def settings_factory():
    """Build settings with selected fields overridden."""
    return make_settings
