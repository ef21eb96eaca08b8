"""
Health check endpoint tests.
"""

from httpx import AsyncClient


async def test_health_check(client: AsyncClient):
    """Health endpoint should report the backend as running."""
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "MTC Backend is running!"}


async def test_responses_carry_request_id(client: AsyncClient):
    response = await client.get("/api/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/nope")
    assert response.status_code == 404
    assert "error" in response.json()
