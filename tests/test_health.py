"""Health probes and metrics exposition"""
from timeline_api.utils.prometheus_metrics import ready


class TestHealth:
    async def test_liveness(self, client):
        response = await client.get("/health/liveness")

        assert response.status_code == 200
        assert response.json() == {"status": "alive"}

    async def test_readiness(self, client):
        response = await client.get("/health/readiness")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}

    async def test_not_ready_while_shutting_down(self, client):
        ready.set(0)
        try:
            readiness = await client.get("/health/readiness")
            health = await client.get("/health")
        finally:
            ready.set(1)

        assert readiness.status_code == 503
        assert health.status_code == 503

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


async def test_metrics_exposes_share_counters(client):
    await client.get("/public/timeline/unknown-token")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert 'timeline_api_share_link_access_total{result="denied"}' in response.text
