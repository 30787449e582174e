"""
Test health and root endpoints for the palette service.
"""


def test_health_check(test_client):
    """Test health check reports service identity."""
    response = test_client.get("/healthz")

    assert response.status_code == 200
    data = response.json()

    # Check required fields
    assert data["ok"] is True
    assert "version" in data
    assert data["service"] == "palette-service"


def test_root(test_client):
    response = test_client.get("/")

    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"
