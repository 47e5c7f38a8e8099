"""Unit Tests for Admin Endpoints."""

from datetime import datetime

from hrchat.connectors.base import QueryError


class TestSchemaEndpoints:
    def test_get_schema(self, client, fake_connector):
        fake_connector.on(
            "FROM db_schema_info",
            rows=[{"table_name": "dice_staff", "table_columns": "staff_id (int)", "sample_data": None}],
        )

        response = client.get("/api/admin/schema")

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is True
        assert "TABLE: dice_staff" in data["schema"]
        assert data["tables"] == ["dice_staff"]

    def test_refresh_schema(self, client, fake_connector):
        response = client.post("/api/admin/refresh")

        data = response.json()
        assert response.status_code == 200
        assert data["success"] is True
        assert data["message"] == "Schema refreshed successfully"
        assert data["schema"] == "Schema not initialized."
        assert fake_connector.procedures == ["update_schema_info"]

    def test_refresh_schema_failure(self, client, fake_connector):
        fake_connector.procedure_error = QueryError("PROCEDURE hr.update_schema_info does not exist")

        response = client.post("/api/admin/refresh")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Schema refresh failed: PROCEDURE hr.update_schema_info does not exist",
        }

    def test_schema_without_database_returns_503(self, bare_client):
        response = bare_client.get("/api/admin/schema")

        assert response.status_code == 503
        assert response.json()["success"] is False


class TestPolicyEndpoints:
    def test_policy_status(self, client, fake_connector):
        fake_connector.on(
            "SUM(content_length)",
            rows=[{"total_chunks": 120, "total_characters": 98000, "max_page": 64}],
        )

        response = client.get("/api/admin/policy/status")

        status = response.json()["status"]
        assert status["loaded"] is True
        assert status["total_chunks"] == 120
        assert status["max_page"] == 64

    def test_policy_stats(self, client, fake_connector):
        fake_connector.on(
            "FROM hr_policy_searches",
            rows=[
                {
                    "query": "leave policy",
                    "search_count": 7,
                    "avg_results": 3.5,
                    "last_searched": datetime(2024, 5, 1, 9, 30),
                }
            ],
        )

        response = client.get("/api/admin/policy/stats")

        stats = response.json()["stats"]
        assert stats[0]["query"] == "leave policy"
        assert stats[0]["search_count"] == 7
        assert stats[0]["last_searched"].startswith("2024-05-01T09:30")


class TestSessionStatsEndpoint:
    def test_session_stats(self, client, fake_connector):
        fake_connector.on(
            "FROM chat_logs",
            rows=[{"total_messages": 2, "queries_executed": 1, "first_message": None, "last_message": None}],
        )

        response = client.get("/api/admin/sessions/chat_1_abc/stats")

        stats = response.json()["stats"]
        assert stats["session_id"] == "chat_1_abc"
        assert stats["total_messages"] == 2
        assert stats["queries_executed"] == 1
