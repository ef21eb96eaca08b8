"""
Shared fixtures: one app + temporary SQLite database per test.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from mtc_api.core.config import Settings
from mtc_api.main import create_app, prepare_store

SECRET = "test-secret-key"


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'mtc-test.db'}",
        secret_key=SECRET,
        bcrypt_rounds=4,
        seed_projects=True,
        log_format="text",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def ctx(app):
    return app.state.context


@pytest.fixture
async def client(app, ctx):
    await prepare_store(ctx)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    await ctx.database.dispose()


async def signup(
    client: AsyncClient,
    email: str,
    password: str = "s3cret-pass",
    *,
    name: str | None = None,
    location: str = "Seattle",
    skills: list[str] | None = None,
) -> tuple[str, dict]:
    """Sign up a user and return (token, user payload)."""
    resp = await client.post(
        "/api/auth/signup",
        json={
            "email": email,
            "password": password,
            "name": name or email.split("@")[0].title(),
            "location": location,
            "skills": skills if skills is not None else [],
        },
    )
    assert resp.status_code == 201, resp.text
    data = resp.json()
    return data["token"], data["user"]


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


NEW_PROJECT = {
    "name": "Masjid Volunteer Scheduler",
    "description": "Shift scheduling for community volunteers.",
    "type": "web-dev",
    "difficulty": "beginner",
    "location": "Remote",
}
