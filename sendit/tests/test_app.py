"""
Tests for application-level endpoints, middleware and error envelopes.
"""

import logging

import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["redis"] == "up"


@pytest.mark.asyncio
async def test_root(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_correlation_id_is_propagated(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client):
    response = await client.get("/health")
    assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_request_log_line_carries_request_fields(client, caplog):
    with caplog.at_level(logging.INFO, logger="sendit.requests"):
        await client.get("/health", headers={"X-Correlation-ID": "log-456"})

    record = next(r for r in caplog.records if r.name == "sendit.requests")
    message = record.getMessage()
    assert message.startswith("GET /health 200 ")
    assert "correlation_id=log-456" in message
    assert record.duration_ms >= 0


@pytest.mark.asyncio
async def test_validation_errors_use_error_envelope(client, user_auth):
    response = await client.post("/v1/parcels", json={"weight": "heavy"}, headers=user_auth["headers"])
    assert response.status_code == 422
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    assert body["details"]["errors"]
