from fastapi.testclient import TestClient

from guideline_qa.core import config
from guideline_qa.main import create_app


def test_health_reports_offline_and_corpus():
    client = TestClient(create_app())
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["corpus_available"] is True
    assert data["llm_enabled"] is False
    assert data["openai_offline"] is True


def test_health_degraded_without_guide(tmp_path, monkeypatch):
    monkeypatch.setattr(config.settings, "guide_path", str(tmp_path / "nope.txt"), raising=False)
    data = TestClient(create_app()).get("/api/health").json()
    assert data["status"] == "degraded"
    assert data["corpus_available"] is False
