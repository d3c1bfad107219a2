"""Tests for the request-context middleware."""

import pytest


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/health")
    r2 = await client.get("/health")
    assert "X-Request-ID" in r1.headers
    assert "X-Request-ID" in r2.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    custom_id = "test-trace-12345"
    r = await client.get("/health", headers={"X-Request-ID": custom_id})
    assert r.headers["X-Request-ID"] == custom_id


@pytest.mark.asyncio
async def test_request_id_on_error_responses(unauthenticated_client):
    r = await unauthenticated_client.get("/api/lists")
    assert r.status_code == 401
    assert "X-Request-ID" in r.headers


@pytest.mark.asyncio
async def test_unhandled_error_keeps_request_id_and_access_log(caplog):
    import logging

    from httpx import ASGITransport, AsyncClient

    from todoapp.main import create_app

    app = create_app()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaput")

    caplog.set_level(logging.INFO)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        r = await ac.get("/boom", headers={"X-Request-ID": "trace-500"})

    assert r.status_code == 500
    assert r.json() == {"message": "kaput"}
    assert r.headers["X-Request-ID"] == "trace-500"

    access = [m for m in caplog.messages if "http.request" in m and "trace-500" in m]
    assert len(access) == 1
