"""
tests/conftest.py -- Shared test fixtures for the ranking API integration tests.

This module provides:
  - make_settings: factory fixture building Settings from keyword args only
    (no env, no .env)
  - _patch_lifespan(): wires test settings and a mock Roblox client into
    app.state, bypassing the real startup login
  - api_client: (TestClient, roblox_mock) with a configured API key and group

Design: the Roblox client is a MagicMock so no test ever reaches the network.
Tests set return_value / side_effect on the three upstream operations
(get_id_from_username, set_rank, login) and assert on the recorded calls.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from asgi import app
from core.config import Settings

API_KEY = "test-secret-key"
GROUP_ID = 4242
RESOLVED_ID = 12345
ROLE = {"id": 9001, "name": "Sergeant", "rank": 50, "memberCount": 3}


def _make_settings(**overrides) -> Settings:
    values = {"roblox_cookie": "test-cookie", "group_id": GROUP_ID, "api_key": API_KEY}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def _patch_lifespan(settings: Settings, roblox: MagicMock):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.roblox = roblox
        yield

    return test_lifespan


@pytest.fixture
def make_settings():
    """Return a builder for Settings that ignores the process env and .env."""
    return _make_settings


@pytest.fixture
def roblox() -> MagicMock:
    """Mock Roblox client that resolves every username and sets rank successfully."""
    client = MagicMock()
    client.get_id_from_username.return_value = RESOLVED_ID
    client.set_rank.return_value = dict(ROLE)
    return client


@pytest.fixture
def api_client(roblox: MagicMock) -> Generator[tuple[TestClient, MagicMock], None, None]:
    """Yield (client, roblox_mock) backed by the real app and a patched lifespan."""
    app.router.lifespan_context = _patch_lifespan(_make_settings(), roblox)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, roblox
