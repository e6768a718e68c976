def test_root(test_client):
    r = test_client.get("/")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "running"
    assert "classifier_enabled" in data


def test_health(test_client):
    r = test_client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_readiness(test_client):
    r = test_client.get("/readiness")
    assert r.status_code == 200
    assert r.json()["ready"] is True
