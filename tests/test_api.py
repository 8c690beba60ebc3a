"""Tests for the FastAPI service."""

import pytest
from fastapi.testclient import TestClient

import threading

from api.dependencies import get_session, get_store, session_lock
from api.main import app
from pipeline.session import Session


@pytest.fixture
def client(model_store):
    session = Session()
    app.dependency_overrides[get_session] = lambda: session
    app.dependency_overrides[get_store] = lambda: model_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def upload(client, text: str):
    return client.post("/dataset/csv", files={"file": ("data.csv", text.encode(), "text/csv")})


def test_root_and_health(client) -> None:
    assert client.get("/").status_code == 200
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["model_loaded"] is False


def test_upload_summary(client) -> None:
    r = upload(client, 'a,"note",failure\n1,"x, y",0\n2,z,1\n')
    assert r.status_code == 200
    body = r.json()
    assert body["headers"] == ["a", "note", "failure"]
    assert body["rows"] == 2
    assert body["has_label"] is True
    assert body["feature_stats"]["a"] == {"min": 1.0, "max": 2.0, "mean": 1.5}
    assert body["feature_stats"]["note"] is None
    assert body["preview"][0]["note"] == "x, y"


def test_non_utf8_upload(client) -> None:
    r = client.post("/dataset/csv", files={"file": ("data.csv", b"\xff\xfe\x00a", "text/csv")})
    assert r.status_code == 400


def test_dataset_summary_before_upload(client) -> None:
    assert client.get("/dataset").status_code == 400


def test_example_and_prepare(client) -> None:
    r = client.post("/dataset/example", json={"rows": 120, "seed": 4})
    assert r.status_code == 200
    assert r.json()["rows"] == 120

    r = client.post("/dataset/prepare")
    assert r.status_code == 200
    body = r.json()
    assert body["rows"] == 120
    assert body["dropped_rows"] == 0
    assert body["label"] == "failure"
    assert len(body["mins"]) == len(body["maxs"]) == len(body["features"]) == 5


def test_example_without_body(client) -> None:
    r = client.post("/dataset/example")
    assert r.status_code == 200
    assert r.json()["rows"] > 0


def test_prepare_errors(client) -> None:
    assert client.post("/dataset/prepare").status_code == 400

    upload(client, "a,b\n1,2\n")
    r = client.post("/dataset/prepare")
    assert r.status_code == 400
    assert "failure" in r.json()["detail"]

    upload(client, "a,failure\nx,1\n")
    assert client.post("/dataset/prepare").status_code == 400


def test_train_predict_save_load(client, separable_csv) -> None:
    upload(client, separable_csv)
    client.post("/dataset/prepare")

    assert client.post("/predict", json={"features": [1, 2]}).status_code == 409
    assert client.post("/model/save").status_code == 409

    r = client.post("/train", json={"epochs": 3, "batch_size": 8, "learning_rate": 0.05, "seed": 0})
    assert r.status_code == 200
    assert [e["epoch"] for e in r.json()["epochs"]] == [0, 1, 2]

    r = client.post("/predict", json={"features": {"a": 8.5, "b": 1}})
    assert r.status_code == 200
    p = r.json()["probability"]
    assert 0.0 <= p <= 1.0
    assert r.json()["percent"].endswith("%")

    assert client.post("/predict", json={"features": {"a": "abc", "b": 1}}).status_code == 400
    assert client.post("/predict", json={"features": ["", 1]}).status_code == 400

    assert client.post("/model/save").json()["status"] == "saved"
    assert client.post("/model/reset").json()["status"] == "reset"
    assert client.post("/predict", json={"features": [8.5, 1]}).status_code == 409

    assert client.post("/model/load").json()["status"] == "loaded"
    r = client.post("/predict", json={"features": [8.5, 1]})
    assert r.json()["probability"] == pytest.approx(p)


def test_train_without_data(client) -> None:
    assert client.post("/train", json={"epochs": 1}).status_code == 400


def test_load_missing_model(client) -> None:
    r = client.post("/model/load")
    assert r.status_code == 404
    assert "No model stored" in r.json()["detail"]


def test_delete_saved_model(client, separable_csv) -> None:
    upload(client, separable_csv)
    client.post("/dataset/prepare")
    client.post("/train", json={"epochs": 1, "seed": 0})
    client.post("/model/save")
    assert client.get("/health").json()["model_saved"] is True

    r = client.delete("/model")
    assert r.status_code == 200
    assert r.json()["status"] == "deleted"
    assert client.get("/health").json()["model_saved"] is False
    assert client.post("/model/load").status_code == 404
    assert client.delete("/model").status_code == 404


def test_session_operations_are_serialized(client, small_csv) -> None:
    """A request waits while another operation holds the session."""
    upload(client, small_csv)
    responses = []

    session_lock.acquire()
    try:
        worker = threading.Thread(target=lambda: responses.append(client.post("/dataset/prepare")))
        worker.start()
        worker.join(timeout=0.5)
        assert worker.is_alive()
        assert responses == []
    finally:
        session_lock.release()

    worker.join(timeout=10)
    assert not worker.is_alive()
    assert responses[0].status_code == 200
    assert responses[0].json()["rows"] == 2


def test_health_not_blocked_by_session_lock(client) -> None:
    with session_lock:
        assert client.get("/health").status_code == 200
