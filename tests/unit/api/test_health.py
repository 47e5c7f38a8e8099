"""
Unit Tests for Health Check Endpoints

Tests the /api/health and /api/ready endpoints.
"""

from hrchat.connectors.base import ConnectionError


class TestHealthEndpoint:
    """Test suite for health check endpoint."""

    def test_health_returns_200(self, client):
        response = client.get("/api/health")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "ok"
        assert data["message"] == "HR Chatbot API is running"
        assert data["version"] == "1.0.0"
        assert isinstance(data["timestamp"], str)

    def test_health_succeeds_without_database(self, bare_client):
        assert bare_client.get("/api/health").status_code == 200


class TestReadinessEndpoint:
    """Test suite for readiness check endpoint."""

    def test_ready_when_all_checks_pass(self, client, fake_connector):
        response = client.get("/api/ready")

        data = response.json()
        assert response.status_code == 200
        assert data["status"] == "ready"
        assert data["checks"] == {"database": True, "pipeline": True}
        assert fake_connector.queries_matching("SELECT 1")

    def test_not_ready_without_components(self, bare_client):
        response = bare_client.get("/api/ready")

        assert response.status_code == 503
        assert response.json()["checks"] == {"database": False, "pipeline": False}

    def test_not_ready_when_database_fails(self, client, fake_connector):
        fake_connector.on("SELECT 1", error=ConnectionError("Lost connection to MySQL"))

        response = client.get("/api/ready")

        assert response.status_code == 503
        assert response.json()["checks"]["database"] is False
