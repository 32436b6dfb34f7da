"""
Tests for health check endpoints.
"""


class TestHealth:
    """Tests for /api/health and /api/health/detailed"""

    def test_basic_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["service"] == "options-api"

    def test_detailed_health_reports_outbox(self, client, rwanda):
        client.post("/api/country_option/create/one", json=rwanda)

        response = client.get("/api/health/detailed")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["dependencies"]["database"]["status"] == "healthy"
        assert body["export_outbox"]["pending"] == 1
        assert body["export_outbox"]["processor_running"] is False

    def test_detailed_health_database_down(self, client, monkeypatch, db_session):
        def broken_execute(*args, **kwargs):
            raise RuntimeError("connection refused")

        monkeypatch.setattr(db_session, "execute", broken_execute)

        response = client.get("/api/health/detailed")

        assert response.status_code == 503
        body = response.json()
        assert body["status"] == "degraded"
        assert body["dependencies"]["database"]["status"] == "unhealthy"
