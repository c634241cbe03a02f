from redis import ConnectionError as RedisConnectionError

from app.config import redis as broker


def test_liveness(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_detailed_health_reports_broker_outage_as_degraded(client, monkeypatch):
    def unreachable():
        raise RedisConnectionError("connection refused")

    monkeypatch.setattr(broker, "ping_broker", unreachable)

    body = client.get("/health/detailed").json()

    assert body["checks"]["database"] == "healthy"
    assert body["checks"]["broker"].startswith("unhealthy")
    assert body["status"] == "degraded"


def test_detailed_health_all_green(client, monkeypatch):
    monkeypatch.setattr(broker, "ping_broker", lambda: True)

    body = client.get("/health/detailed").json()

    assert body == {"status": "healthy", "checks": {"database": "healthy", "broker": "healthy"}}


def test_root_and_api_info(client):
    assert client.get("/").json()["endpoints"]["api"] == "/api/v1"
    assert "authentication" in client.get("/api/v1/").json()
