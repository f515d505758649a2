"""
Shared pytest fixtures and configuration for all tests
"""
import json
import sys
from pathlib import Path

import httpx
import pytest

# Add project root to Python path for imports
root_dir = Path(__file__).parent.parent
sys.path.insert(0, str(root_dir))

from clients import FalEditClient  # noqa: E402
from config import Settings  # noqa: E402

SAMPLE_IMAGE = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="


class FakeUpstream:
    """httpx.MockTransport handler that records every request it receives."""

    def __init__(self, status_code: int = 200, body=None, error: Exception = None):
        self.status_code = status_code
        self.body = body if body is not None else {"images": [{"url": "https://x/y.png"}]}
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        text = self.body if isinstance(self.body, str) else json.dumps(self.body)
        return httpx.Response(self.status_code, text=text)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def sample_image():
    return SAMPLE_IMAGE


@pytest.fixture
def make_upstream():
    """Factory for fake upstreams with a custom status, body or transport error"""
    return FakeUpstream


@pytest.fixture
def upstream():
    """Upstream that answers with a single image by default"""
    return FakeUpstream()


@pytest.fixture
def make_settings():
    def _make(**overrides) -> Settings:
        overrides.setdefault("fal_key", "test-key")
        return Settings(_env_file=None, **overrides)

    return _make


@pytest.fixture
def fal_client(upstream):
    """FalEditClient wired to the fake upstream"""
    return FalEditClient(
        api_key="test-key",
        endpoint_url="https://fal.test/edit",
        transport=httpx.MockTransport(upstream),
    )


@pytest.fixture
def make_api_client(make_settings):
    """Build a TestClient whose settings and upstream are overridden"""
    from fastapi.testclient import TestClient

    from main import app, get_fal_client
    from config import get_settings

    def _make(upstream: FakeUpstream, **overrides) -> TestClient:
        settings = make_settings(**overrides)
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_fal_client] = lambda: FalEditClient(
            api_key=settings.fal_key,
            endpoint_url=settings.fal_endpoint_url,
            transport=httpx.MockTransport(upstream),
        )
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()
