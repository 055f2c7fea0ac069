"""Tests for application wiring."""

from app.main import create_app


def test_dashboard_route_registered():
    """The stats endpoint is mounted under the dashboard prefix."""
    paths = create_app().openapi()["paths"]
    assert "/dashboard/stats" in paths
    assert "/health" in paths
    assert "/health/ready" in paths


async def test_openapi_documents_query_aliases(client):
    """OpenAPI exposes the camelCase date parameters."""
    response = await client.get("/openapi.json")

    assert response.status_code == 200
    params = {
        p["name"] for p in response.json()["paths"]["/dashboard/stats"]["get"]["parameters"]
    }
    assert params == {"period", "startDate", "endDate", "branch_id"}


async def test_unknown_route_is_404(client):
    """Unknown paths are not swallowed by the error handlers."""
    response = await client.get("/dashboard/unknown")
    assert response.status_code == 404
