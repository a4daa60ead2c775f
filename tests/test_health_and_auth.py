import time
from fastapi.testclient import TestClient
from app.config import settings
from app.main import app


client = TestClient(app)


def test_health():
    r = client.get("/v1/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_sizing_requires_api_key():
    r = client.post("/v1/sizing/parse", json={"text": "178cm"})
    assert r.status_code == 401


def test_sizing_rejects_wrong_key():
    r = client.post("/v1/sizing/parse", json={"text": "178cm"}, headers={"X-API-Key": "nope"})
    assert r.status_code == 401


def test_bearer_key_accepted():
    r = client.post(
        "/v1/sizing/parse",
        json={"text": "178cm"},
        headers={"Authorization": f"Bearer {settings.api_key}"},
    )
    assert r.status_code == 200


def test_rate_limit(monkeypatch):
    monkeypatch.setattr(settings, "rate_limit_burst", 2)
    monkeypatch.setattr(settings, "rate_limit_per_min", 1)
    codes = [client.get("/v1/health").status_code for _ in range(3)]
    assert codes == [200, 200, 429]


def test_idle_rate_limit_buckets_are_pruned(monkeypatch):
    from app import main

    monkeypatch.setattr(main, "_BUCKET_PRUNE_THRESHOLD", 3)
    now = time.time()
    main._buckets.update({
        "10.0.0.1": (30.0, now - 600),
        "10.0.0.2": (30.0, now - 600),
        "10.0.0.3": (0.0, now),
    })
    assert main._rate_limit("10.0.0.9", 60, 30) is True
    assert set(main._buckets) == {"10.0.0.3", "10.0.0.9"}
