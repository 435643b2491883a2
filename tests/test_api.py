"""Tests for the HTTP API and server wiring."""

import time

import pytest
from fastapi.testclient import TestClient

from app.api import create_app
from config import Config
from server import make_lifespan


def _wait_for_processed(client: TestClient, count: int, timeout: float = 5.0) -> dict:
    deadline = time.monotonic() + timeout
    while True:
        status = client.get("/status").json()
        if status["processed"] + status["failed"] >= count:
            return status
        if time.monotonic() > deadline:
            raise AssertionError(f"events not processed in time: {status}")
        time.sleep(0.02)


@pytest.fixture
def settings(peon_dir, packs_dir):
    return Config(
        peon_dir=peon_dir,
        packs_dir=packs_dir,
        project_dir="/home/me/code/myapp",
        set_tab_title=False,
    )


@pytest.fixture
def client(settings, dispatcher, peon_pack):
    app = create_app(lifespan=make_lifespan(settings, dispatcher))
    with TestClient(app) as test_client:
        yield test_client


class TestEndpoints:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_startup_greeting_delivered(self, client, dispatcher):
        assert dispatcher.titles[0] == "myapp: ready"
        assert len(dispatcher.sounds) == 1

    def test_post_event_is_processed(self, client, dispatcher):
        response = client.post("/events", json={"type": "session.idle"})

        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        _wait_for_processed(client, 1)
        assert dispatcher.titles[-1] == "● myapp: done"
        assert dispatcher.notifications[-1].message == "myapp - Task complete"

    def test_unknown_event_accepted_and_ignored(self, client, dispatcher):
        response = client.post("/events", json={"type": "file.edited"})

        assert response.status_code == 200
        _wait_for_processed(client, 1)
        assert dispatcher.titles == ["myapp: ready"]

    def test_missing_type_rejected(self, client):
        response = client.post("/events", json={"properties": {}})
        assert response.status_code == 422

    def test_empty_type_rejected(self, client):
        response = client.post("/events", json={"type": ""})
        assert response.status_code == 400

    def test_status_reports_pause_and_pack(self, client, peon_dir):
        (peon_dir / ".paused").touch()

        status = client.get("/status").json()

        assert status["paused"] is True
        assert status["active_pack"] == "peon"
        assert status["project"] == "myapp"
        assert status["session_id"].startswith("oc-")
        assert status["enabled"] is True


class TestDisabledConfig:
    def test_disabled_server_stays_silent(self, settings, dispatcher, peon_pack):
        settings.config_path.write_text('{"enabled": false}')
        app = create_app(lifespan=make_lifespan(settings, dispatcher))

        with TestClient(app) as client:
            client.post("/events", json={"type": "session.error"})
            status = _wait_for_processed(client, 1)

        assert status["enabled"] is False
        assert status["active_pack"] is None
        assert dispatcher.titles == []
        assert dispatcher.sounds == []
