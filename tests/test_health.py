import pytest
from httpx import ASGITransport, AsyncClient

from backend.main import app


@pytest.mark.asyncio
async def test_health_check(db_ready) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_openapi_lists_drill_routes(db_ready) -> None:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        paths = (await client.get("/openapi.json")).json()["paths"]
    assert "/api/session/start" in paths
    assert "/api/words/search" in paths
    assert "/api/stats/history" in paths
