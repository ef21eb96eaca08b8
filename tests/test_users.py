"""
Tests for the credential store and the self-service user endpoints.

Tests cover:
- First-user-becomes-admin, including concurrent first signups
- Skills round-trip and replacement
- Password replacement
- Admin user listing never exposing password hashes
"""

from __future__ import annotations

import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy import func
from sqlmodel import select

from mtc_api.core.errors import DuplicateEmailError
from mtc_api.core.auth import verify_password
from mtc_api.main import prepare_store
from mtc_api.models.user import User
from mtc_api.services import users as users_service
from mtc_api.services.users import CredentialStore
from tests.conftest import FrozenClock, bearer, signup


def _store(session, ctx) -> CredentialStore:
    return CredentialStore(session, ctx.clock, bcrypt_rounds=4)


# ---------------------------------------------------------------------------
# Credential store
# ---------------------------------------------------------------------------

class TestCredentialStore:
    async def test_first_user_is_admin_rest_are_not(self, ctx):
        await prepare_store(ctx)
        async with ctx.database.session() as session:
            store = _store(session, ctx)
            first = await store.create_user("a@example.com", "pw", "A", "Seattle", [])
            second = await store.create_user("b@example.com", "pw", "B", "Seattle", [])
            third = await store.create_user("c@example.com", "pw", "C", "Remote", [])

        assert first.is_admin is True
        assert second.is_admin is False
        assert third.is_admin is False
        await ctx.database.dispose()

    async def test_concurrent_first_signups_yield_exactly_one_admin(self, ctx):
        await prepare_store(ctx)

        async def create(i: int) -> User:
            async with ctx.database.session() as session:
                return await _store(session, ctx).create_user(
                    f"user{i}@example.com", "pw", f"User {i}", "Seattle", []
                )

        users = await asyncio.gather(*(create(i) for i in range(8)))
        assert sum(1 for u in users if u.is_admin) == 1

        async with ctx.database.session() as session:
            result = await session.execute(
                select(func.count()).select_from(User).where(User.is_admin == True)  # noqa: E712
            )
            assert result.scalar_one() == 1
        await ctx.database.dispose()

    async def test_duplicate_email(self, ctx):
        await prepare_store(ctx)
        async with ctx.database.session() as session:
            store = _store(session, ctx)
            await store.create_user("a@example.com", "pw", "A", "Seattle", [])
            with pytest.raises(DuplicateEmailError):
                await store.create_user("a@example.com", "pw2", "A2", "Remote", [])
        await ctx.database.dispose()

    async def test_email_is_case_sensitive_as_stored(self, ctx):
        await prepare_store(ctx)
        async with ctx.database.session() as session:
            store = _store(session, ctx)
            await store.create_user("Alice@example.com", "pw", "A", "Seattle", [])
            assert await store.find_by_email("Alice@example.com") is not None
            assert await store.find_by_email("alice@example.com") is None
        await ctx.database.dispose()

    async def test_password_is_hashed(self, ctx):
        await prepare_store(ctx)
        async with ctx.database.session() as session:
            store = _store(session, ctx)
            user = await store.create_user("a@example.com", "plain-pw", "A", "Seattle", [])
            assert user.password_hash != "plain-pw"
            assert user.password_hash.startswith("$2b$04$")
            assert await store.authenticate("a@example.com", "plain-pw") is not None
            assert await store.authenticate("a@example.com", "nope") is None
        await ctx.database.dispose()

    async def test_unknown_email_still_checks_a_hash(self, ctx, monkeypatch):
        await prepare_store(ctx)
        checked = []

        def recording_verify(password, hashed):
            checked.append(hashed)
            return verify_password(password, hashed)

        monkeypatch.setattr(users_service, "verify_password", recording_verify)
        async with ctx.database.session() as session:
            store = _store(session, ctx)
            assert await store.authenticate("ghost@example.com", "pw") is None

        assert len(checked) == 1
        assert checked[0].startswith("$2b$04$")
        await ctx.database.dispose()

    async def test_joined_at_comes_from_clock(self, ctx):
        await prepare_store(ctx)
        clock = FrozenClock()
        async with ctx.database.session() as session:
            store = CredentialStore(session, clock, bcrypt_rounds=4)
            user = await store.create_user("a@example.com", "pw", "A", "X", [])
            assert user.joined_at.replace(tzinfo=None) == clock.now.replace(tzinfo=None)
        await ctx.database.dispose()


# ---------------------------------------------------------------------------
# Self-service endpoints
# ---------------------------------------------------------------------------

class TestUserEndpoints:
    async def test_signup_skills_round_trip(self, client: AsyncClient):
        skills = ["rust", "Python", "python", "UX design"]
        token, _ = await signup(client, "alice@example.com", skills=skills)
        profile = (await client.get("/api/auth/profile", headers=bearer(token))).json()
        assert profile["skills"] == skills

    async def test_update_skills_replaces_list(self, client: AsyncClient):
        token, _ = await signup(client, "alice@example.com", skills=["a", "b"])
        resp = await client.put(
            "/api/users/skills", json={"skills": ["z", "a", "m"]}, headers=bearer(token)
        )
        assert resp.status_code == 200
        assert resp.json() == {"message": "Skills updated successfully"}

        profile = (await client.get("/api/auth/profile", headers=bearer(token))).json()
        assert profile["skills"] == ["z", "a", "m"]

    async def test_update_skills_requires_list(self, client: AsyncClient):
        token, _ = await signup(client, "alice@example.com")
        resp = await client.put("/api/users/skills", json={}, headers=bearer(token))
        assert resp.status_code == 400

    async def test_update_password(self, client: AsyncClient):
        token, _ = await signup(client, "alice@example.com", password="old-pw")
        resp = await client.put(
            "/api/users/password", json={"newPassword": "new-pw"}, headers=bearer(token)
        )
        assert resp.status_code == 200

        old = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "old-pw"}
        )
        new = await client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "new-pw"}
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_self_service_requires_token(self, client: AsyncClient):
        assert (await client.put("/api/users/skills", json={"skills": []})).status_code == 401
        assert (
            await client.put("/api/users/password", json={"newPassword": "x"})
        ).status_code == 401

    async def test_admin_user_list_omits_password(self, client: AsyncClient):
        admin_token, _ = await signup(client, "alice@example.com", skills=["python"])
        await signup(client, "bob@example.com", skills=["go", "sql"])

        resp = await client.get("/api/admin/users", headers=bearer(admin_token))
        assert resp.status_code == 200
        users = {u["email"]: u for u in resp.json()}
        assert set(users) == {"alice@example.com", "bob@example.com"}
        assert users["alice@example.com"]["isAdmin"] is True
        assert users["bob@example.com"]["isAdmin"] is False
        assert users["bob@example.com"]["skills"] == ["go", "sql"]
        for u in users.values():
            assert not any("password" in key.lower() for key in u)
