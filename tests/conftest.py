"""
tests/conftest.py -- Shared test fixtures for bizdir tests.

This module provides:
  - make_test_context(): builds an isolated AppContext on in-memory DBs
  - _patch_lifespan(): installs a test AppContext on app.state, bypassing real startup
  - api_client: (client, ctx) -- TestClient over the real app, one per test module
  - register: helper fixture that registers an account and returns (token, user_id)
  - user_store / credentials / signer: unit-test building blocks

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
for the API fixtures because TestClient runs sync route handlers in a thread
pool. Plain :memory: DBs are per-connection and would present a blank schema
to each worker thread. The named URI format
(file:name?mode=memory&cache=shared&uri=true) shares one in-memory instance
across all connections in the same process. Each test module gets its own
name, so modules never see each other's rows.

DEBUG must be set before any api/core import so get_settings() (read at
import time for CORS) auto-generates SECRET_KEY instead of raising.
"""

from __future__ import annotations

import os
import time
from collections.abc import Callable, Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.context import AppContext, build_context
from api.main import app
from auth.credentials import CredentialStore
from auth.store import UserStore
from auth.tokens import TokenSigner
from core.config import Settings

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters-long"
TEST_PASSWORD = "pw123456"


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------


def make_test_context(db_suffix: str, clock: Callable[[], float] = time.time) -> AppContext:
    """Build an AppContext on isolated named shared-memory SQLite databases.

    Args:
        db_suffix: Unique string appended to the DB names so test modules
                   don't share state.
        clock:     Injected into the issuer and validator.
    """
    settings = Settings(
        debug=True,
        secret_key=TEST_SECRET,
        bcrypt_rounds=4,
        session_sweep_interval_seconds=0,
        auth_database_url=f"sqlite:///file:test_auth_{db_suffix}?mode=memory&cache=shared&uri=true",
        directory_database_url=f"sqlite:///file:test_dir_{db_suffix}?mode=memory&cache=shared&uri=true",
    )
    return build_context(settings, clock=clock)


def _patch_lifespan(ctx: AppContext):
    """Return an async context manager that replaces the real lifespan.

    Installs the pre-built test context on app.state so TestClient routes see
    isolated test DBs rather than the production databases. No sweep task is
    started; tests call purge_expired_sessions() directly.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.ctx = ctx
        app.state.sweep_task = None
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# API fixtures -- one TestClient per test module for speed
# ---------------------------------------------------------------------------


@pytest.fixture(scope="module")
def api_client(request) -> Generator[tuple[TestClient, AppContext], None, None]:
    """Yield (client, ctx) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real middleware, dependencies and route handlers against in-memory
    stores. ctx is returned so tests can inspect rows directly.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    ctx = make_test_context(suffix)
    app.router.lifespan_context = _patch_lifespan(ctx)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, ctx

    ctx.close()


@pytest.fixture(scope="module")
def register(api_client) -> Callable[..., tuple[str, int]]:
    """Return a function that registers an account and yields (token, user_id)."""
    client, _ctx = api_client

    def _register(email: str, role: str, name: str = "Test User", password: str = TEST_PASSWORD, **extra):
        resp = client.post(
            "/register",
            json={"name": name, "email": email, "password": password, "role": role, **extra},
        )
        assert resp.status_code == 201, f"Expected 201, got {resp.status_code}: {resp.text}"
        data = resp.json()
        return data["token"], data["user"]["id"]

    return _register


# ---------------------------------------------------------------------------
# Unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def user_store() -> Generator[UserStore, None, None]:
    store = UserStore("sqlite:///:memory:")
    yield store
    store.close()


@pytest.fixture(scope="session")
def credentials() -> CredentialStore:
    return CredentialStore(rounds=4)


@pytest.fixture
def signer() -> TokenSigner:
    return TokenSigner(TEST_SECRET)
