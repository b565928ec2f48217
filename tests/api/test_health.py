"""Tests for health endpoint."""


def test_health_check_success(api_client):
    """Test successful health check response."""
    response = api_client.get("/v1/health")

    assert response.status_code == 200
    data = response.json()

    assert data["status"] == "healthy"
    assert isinstance(data["version"], str)
    assert isinstance(data["uptime"], str)
    assert isinstance(data["timestamp"], str)
    assert data["services"] == 4


def test_health_check_uptime_format(api_client):
    """Test uptime format is correct."""
    response = api_client.get("/v1/health")
    uptime = response.json()["uptime"]

    assert "d" in uptime and "h" in uptime and "m" in uptime and "s" in uptime
