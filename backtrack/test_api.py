import pytest
from fastapi.testclient import TestClient

from backtrack import config
from backtrack.main import app


@pytest.fixture
def frame_payload(make_landmarks):
    def build(timestamp_ms=None, **geometry):
        return {
            "landmarks": [l.model_dump() for l in make_landmarks(**geometry)],
            "timestamp_ms": timestamp_ms
        }
    return build


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(config, "NOTIFY_WEBHOOK_URL", None)
    with TestClient(app) as client:
        yield client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_thresholds_roundtrip(client, frame_payload):
    assert client.get("/thresholds").json() == {
        "min_distance": 50.0, "max_lean_angle": 8.0, "max_slouch_angle": 12.0
    }
    updated = {"min_distance": 70, "max_lean_angle": 5, "max_slouch_angle": 10}
    assert client.put("/thresholds", json=updated).status_code == 200
    assert client.get("/thresholds").json()["min_distance"] == 70

    response = client.post("/frames", json=frame_payload())
    assert response.json()["status"] == "too_close"


def test_rejects_invalid_thresholds(client):
    response = client.put("/thresholds", json={"min_distance": -1, "max_lean_angle": 8,
                                                "max_slouch_angle": 12})
    assert response.status_code == 422


def test_frame_classification(client, frame_payload):
    client.put("/thresholds", json={"min_distance": 50, "max_lean_angle": 8, "max_slouch_angle": 12})
    response = client.post("/frames", json=frame_payload(lean_deg=20))
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "leaning"
    assert body["lean_angle"] == 20.0
    assert body["distance"] == 60 and isinstance(body["distance"], int)
    assert body["issues"] == [
        {"type": "leaning", "message": "Leaning right (20°)", "severity": "danger"}
    ]
    status = client.get("/status").json()
    assert status["status"] == "leaning"
    assert isinstance(status["distance"], int)


def test_missing_landmarks_is_not_detected(client):
    response = client.post("/frames", json={"landmarks": None})
    assert response.status_code == 200
    assert response.json()["status"] == "not_detected"
    assert response.json()["confidence"] == 0


def test_session_flow(client, frame_payload):
    client.put("/thresholds", json={"min_distance": 50, "max_lean_angle": 8, "max_slouch_angle": 12})
    started = client.post("/sessions/start").json()
    assert started["is_tracking"] is True
    assert started["posture_score"] == 100

    client.post("/frames", json=frame_payload(timestamp_ms=0))
    client.post("/frames", json=frame_payload(timestamp_ms=1000))
    client.post("/frames", json=frame_payload(timestamp_ms=2000, lean_deg=20))

    stats = client.get("/sessions/stats").json()
    assert stats["stats"]["total_time"] == 2
    assert stats["stats"]["good_posture_time"] == 1
    assert stats["posture_score"] == 50

    stopped = client.post("/sessions/stop")
    assert stopped.json()["is_tracking"] is False
    assert client.post("/sessions/stop").status_code == 409


def test_calibration_flow(client, frame_payload):
    assert client.delete("/calibration").json()["is_calibrated"] is False
    started = client.post("/calibration", json={"duration_seconds": 0, "min_samples": 1})
    assert started.json()["in_progress"] is True

    client.post("/frames", json=frame_payload(nose_offset=0.25))
    state = client.get("/calibration").json()
    assert state["is_calibrated"] is True
    assert state["slouch_baseline"] == pytest.approx(0.25)

    messages = [n["message"] for n in client.get("/notifications").json()]
    assert "Calibration complete! Your current posture is now the baseline." in messages


def test_notification_dismissal(client, frame_payload):
    client.delete("/notifications")
    client.post("/calibration", json={"duration_seconds": 0, "min_samples": 1})
    client.post("/frames", json=frame_payload())
    notification = client.get("/notifications").json()[0]

    response = client.delete(f"/notifications/{notification['id']}")
    assert response.status_code == 200
    assert client.get("/notifications").json()[0]["exiting"] is True
    assert client.delete("/notifications/99999").status_code == 404

    client.delete("/notifications")
    assert client.get("/notifications").json() == []


def test_permission_without_platform_notifier(client):
    response = client.post("/notifications/permission")
    assert response.json() == {"permission": "denied"}
