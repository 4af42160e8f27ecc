"""
Test configuration and fixtures.

Provides:
- An in-memory Supabase backend shared by every client the app creates
- Sessions for a customer, an admin and a super admin
- HTTPX AsyncClient against the ASGI app, anonymous or carrying a Bearer token
"""
import os
import tempfile
from typing import AsyncGenerator, Callable, Optional

import pytest
from httpx import ASGITransport, AsyncClient

# Keep test runs from writing log files into the working tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="atelier-logs-"))

from atelier.core import dependencies
from atelier.core.forms import submissions
from atelier.main import app

from tests.fakes import FakeBackend, FakeSession


# =============================================================================
# Backend Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture(scope="function")
def customer(backend: FakeBackend) -> FakeSession:
    return backend.add_user("asha@example.com", name="Asha Rao", role="customer", phone="+919876543210")


@pytest.fixture(scope="function")
def admin(backend: FakeBackend) -> FakeSession:
    return backend.add_user("staff@example.com", name="Studio Staff", role="admin", business_id="studio-1")


@pytest.fixture(scope="function")
def super_admin(backend: FakeBackend) -> FakeSession:
    return backend.add_user("owner@example.com", name="Owner", role="super_admin")


@pytest.fixture(scope="function")
def use_backend(backend: FakeBackend, monkeypatch) -> Callable[[Optional[FakeBackend]], None]:
    """
    Route the app's per-request Supabase clients to a backend.

    Passing None simulates a deployment without Supabase credentials.
    """

    def install(target: Optional[FakeBackend]):
        async def fake_authenticated_client(access_token, refresh_token=None):
            if target is None:
                return None
            client = target.client()
            if access_token:
                try:
                    await client.auth.set_session(access_token, refresh_token or "")
                except Exception:
                    pass
            return client

        monkeypatch.setattr(dependencies, "get_authenticated_supabase_client", fake_authenticated_client)

    install(backend)
    return install


@pytest.fixture(autouse=True)
def reset_submissions():
    submissions._in_flight.clear()
    yield
    submissions._in_flight.clear()


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(use_backend) -> AsyncGenerator[AsyncClient, None]:
    """
    Create unauthenticated AsyncClient; pass `headers=bearer(session)` per
    request to act as a signed-in user.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        follow_redirects=False,
    ) as c:
        yield c
