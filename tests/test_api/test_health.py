"""
Tests for health check and root endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    """Test health check endpoint returns OK status."""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["storageType"] == "local"
    assert "database" in data


@pytest.mark.asyncio
async def test_health_reports_chunked_storage(chunked_client: AsyncClient):
    response = await chunked_client.get("/health")

    assert response.status_code == 200
    assert response.json()["storageType"] == "chunked"


@pytest.mark.asyncio
async def test_health_not_under_api_prefix(client: AsyncClient):
    response = await client.get("/api/health")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_root_endpoint(client: AsyncClient):
    """Test root endpoint returns API info."""
    response = await client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "FileVault"
    assert "version" in data
    assert data["api"] == "/api"
