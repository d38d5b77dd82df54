"""
Inventory API — Test Configuration (conftest.py)
==================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own working directory and a fresh application
       (empty repository, empty photo cache), so no state leaks between tests.

Fixture Hierarchy:
    Function-scoped:
    ├── cache_dir: "cache" relative to a per-test working directory
    ├── settings: Settings pointing at that cache directory
    ├── app: create_app(settings)
    ├── repository / photo_store: the app's own service instances
    ├── sample_image_bytes: Fake image content for upload tests
    └── test_client: HTTPX AsyncClient bound to the app
"""

import os

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Keep a developer's .env or INVENTORY_* variables out of the tests
for _key in [k for k in os.environ if k.startswith("INVENTORY_")]:
    del os.environ[_key]
os.environ["INVENTORY_LOG_LEVEL"] = "WARNING"

from inventory_api.config import Settings  # noqa: E402
from inventory_api.main import create_app  # noqa: E402


@pytest.fixture
def cache_dir(tmp_path, monkeypatch):
    """
    Relative cache directory inside a temporary working directory.

    Relative on purpose: the public photo path is derived from the directory
    name as configured, so "cache" gives the readable prefix "/cache".
    """
    monkeypatch.chdir(tmp_path)
    return "cache"


@pytest.fixture
def settings(cache_dir):
    return Settings(host="127.0.0.1", port=3000, cache_dir=cache_dir, _env_file=None)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def repository(app):
    return app.state.repository


@pytest.fixture
def photo_store(app):
    return app.state.photo_store


@pytest.fixture
def sample_image_bytes():
    """
    Minimal JPEG bytes: SOI marker + JFIF header + EOI marker.

    Not a viewable image; nothing in the service decodes photos.
    """
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest_asyncio.fixture
async def test_client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/inventory")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
