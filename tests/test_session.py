"""SessionProvider lifecycle, sign-in/up/out."""
import asyncio

import pytest

from atelier.core.exceptions import AuthenticationError, BackendNotConfiguredError
from atelier.core.session import SessionProvider


async def restored(backend, session=None) -> SessionProvider:
    client = backend.client()
    if session is not None:
        await client.auth.set_session(session.access_token, session.refresh_token)
    provider = SessionProvider(client)
    await provider.initialize()
    return provider


async def test_restores_session_and_profile(backend, customer):
    provider = await restored(backend, customer)

    assert provider.loading is False
    assert provider.user_id == customer.user.id
    assert provider.profile.role == "customer"
    assert provider.profile.name == "Asha Rao"


async def test_loading_ends_even_when_restore_fails(backend):
    client = backend.client()

    async def broken():
        raise RuntimeError("network down")

    client.auth.get_session = broken
    provider = SessionProvider(client)
    assert provider.loading is True

    await provider.initialize()

    assert provider.loading is False
    assert provider.user is None


async def test_initialize_twice_subscribes_once(backend, customer):
    provider = await restored(backend, customer)
    await provider.initialize()

    assert len(provider.client.auth.listeners) == 1
    await provider.teardown()
    assert provider.client.auth.listeners == []


async def test_registration_survives_profile_upsert_failure(backend):
    backend.fail("users", "upsert", "duplicate key value violates unique constraint")
    provider = SessionProvider(backend.client())

    user = await provider.sign_up("new@example.com", "secret123", "New Customer", "+91000")
    assert user is not None
    assert backend.find("users", email="new@example.com") is None

    profile = await SessionProvider(backend.client()).sign_in("new@example.com", "secret123")
    assert profile.role == "customer"
    assert profile.name == "New Customer"


async def test_registration_writes_and_confirms_profile(backend):
    provider = SessionProvider(backend.client())
    await provider.sign_up("fresh@example.com", "secret123", "Fresh", None)

    row = backend.find("users", email="fresh@example.com")
    assert row["role"] == "customer"
    assert backend.calls_to("users", "upsert") == 1
    # read-after-write confirmation
    assert backend.calls_to("users", "select") == 1


async def test_duplicate_registration_reports_backend_message(backend, customer):
    provider = SessionProvider(backend.client())
    with pytest.raises(AuthenticationError) as exc:
        await provider.sign_up("asha@example.com", "secret123", "Asha", None)
    assert exc.value.message == "User already registered"


async def test_bad_password_is_an_authentication_error(backend, customer):
    provider = SessionProvider(backend.client())
    with pytest.raises(AuthenticationError) as exc:
        await provider.sign_in("asha@example.com", "wrong")
    assert exc.value.message == "Invalid login credentials"
    assert provider.user is None


async def test_auth_state_change_refreshes_profile(backend, customer):
    provider = await restored(backend)
    assert provider.user is None

    await provider.client.auth.sign_in_with_password({"email": "asha@example.com", "password": "secret123"})
    await asyncio.sleep(0)
    await asyncio.sleep(0)

    assert provider.user_id == customer.user.id
    assert provider.profile.email == "asha@example.com"

    await provider.client.auth.sign_out()
    assert provider.user is None
    assert provider.profile is None


async def test_sign_out_clears_local_state_when_backend_fails(backend, customer):
    provider = await restored(backend, customer)
    provider.client.auth.fail_sign_out = True

    await provider.sign_out()

    assert provider.user is None
    assert provider.session is None
    assert provider.profile is None


async def test_google_sign_in_returns_provider_url(backend):
    provider = SessionProvider(backend.client())
    url = await provider.sign_in_with_google("http://localhost:5173/dashboard")
    assert "provider=google" in url
    assert url.endswith("redirect_to=http://localhost:5173/dashboard")


async def test_without_backend_nothing_loads_and_writes_fail():
    provider = SessionProvider(None)
    await provider.initialize()

    assert provider.loading is False
    assert provider.configured is False
    with pytest.raises(BackendNotConfiguredError) as exc:
        await provider.sign_in("a@example.com", "x")
    assert exc.value.message == "Supabase is not configured. Please update .env with valid credentials."
    with pytest.raises(BackendNotConfiguredError):
        await provider.sign_up("a@example.com", "secret123", "A", None)
