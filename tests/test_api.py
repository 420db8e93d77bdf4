"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from src import config
from src.api import main
from src.ingestion import UpstreamGraphError


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(config, "BONFIRES_API_URL", "")
    with TestClient(main.app) as test_client:
        yield test_client


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["graph_source"] == "mock"
        assert data["sessions_count"] == 0


class TestSessionRoutes:
    """Tests for GET/POST /api/session/{id}."""

    def test_unknown_session(self, client):
        response = client.get("/api/session/nope")

        assert response.status_code == 404
        assert response.json() is None

    def test_post_creates_session(self, client):
        response = client.post("/api/session/s1", json={"selectedNodeId": "actor:1"})

        assert response.status_code == 200
        data = response.json()
        assert data["selectedNodeId"] == "actor:1"
        assert data["path"] == ["actor:1"]
        assert data["viewMode"] == "cloud"
        assert client.get("/api/session/s1").json() == data

    def test_partial_update_keeps_other_fields(self, client):
        client.post("/api/session/s1", json={"selectedNodeId": "actor:1", "zoomState": "cluster"})

        data = client.post("/api/session/s1", json={"autoPlay": False}).json()

        assert data["selectedNodeId"] == "actor:1"
        assert data["zoomState"] == "cluster"
        assert data["autoPlay"] is False

    def test_null_selection_clears(self, client):
        client.post("/api/session/s1", json={"selectedNodeId": "actor:1"})

        data = client.post("/api/session/s1", json={"selectedNodeId": None}).json()

        assert data["selectedNodeId"] is None
        assert data["path"] == ["actor:1"]

    def test_view_settings_merge(self, client):
        client.post("/api/session/s1", json={"viewSettings": {"force": {"linkDistance": 150}}})

        data = client.post(
            "/api/session/s1", json={"viewSettings": {"force": {"maxRadius": 30}}}
        ).json()

        assert data["viewSettings"]["force"]["linkDistance"] == 150
        assert data["viewSettings"]["force"]["maxRadius"] == 30

    def test_invalid_values_rejected(self, client):
        assert client.post("/api/session/s1", json={"viewMode": "spiral"}).status_code == 400
        assert (
            client.post(
                "/api/session/s1", json={"viewSettings": {"force": {"gravity": 1}}}
            ).status_code
            == 400
        )


class TestPathRoutes:
    """Tests for saving and exporting paths."""

    def test_save_and_export(self, client):
        saved = client.post("/api/paths", json={"sessionId": "s1", "path": ["a", "b"]})

        assert saved.status_code == 200
        path_id = saved.json()["pathId"]

        exported = client.get(f"/api/paths/{path_id}/export")
        assert exported.status_code == 200
        assert exported.text == "a\nb"
        assert exported.headers["content-type"].startswith("text/plain")
        assert (
            exported.headers["content-disposition"]
            == f'attachment; filename="path-{path_id}.txt"'
        )

    @pytest.mark.parametrize(
        "body",
        [
            {"path": ["a"]},
            {"sessionId": "", "path": ["a"]},
            {"sessionId": "s1", "path": "a"},
            {"sessionId": "s1"},
        ],
    )
    def test_invalid_body(self, client, body):
        response = client.post("/api/paths", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid body"}

    def test_non_json_body(self, client):
        response = client.post("/api/paths", content=b"not json")

        assert response.status_code == 400

    def test_export_unknown(self, client):
        assert client.get("/api/paths/nope/export").status_code == 404


class TestGraphRoutes:
    """Tests for the graph, settings and layout endpoints."""

    def test_activities_mock(self, client):
        data = client.get("/api/bonfire/activities").json()

        assert len(data["nodes"]) == 18
        assert len(data["edges"]) == 24
        assert all("weight" in n for n in data["nodes"])

    def test_activities_upstream_failure(self, client, monkeypatch):
        class FailingRepository:
            async def fetch(self, refresh=False):
                raise UpstreamGraphError("Bonfires fetch failed: 500")

        monkeypatch.setattr(main, "graph_repo", FailingRepository())

        response = client.get("/api/bonfire/activities")

        assert response.status_code == 502
        assert "500" in response.json()["error"]
        assert client.get("/api/layout/cloud").status_code == 502

    def test_setting_definitions(self, client):
        data = client.get("/api/settings/definitions").json()

        assert data["force"]["linkDistance"]["type"] == "slider"
        assert data["list"] == {}

    def test_layout(self, client):
        data = client.get("/api/layout/cloud").json()

        assert data["viewMode"] == "cloud"
        assert data["focalId"] == "activity:101"
        assert len(data["items"]) == 18

    def test_layout_uses_session_and_filter(self, client):
        client.post("/api/session/s1", json={"selectedNodeId": "tag:ux"})

        data = client.get("/api/layout/cloud", params={"session": "s1", "filter": "tag"}).json()

        assert data["focalId"] == "tag:ux"
        assert len(data["items"]) == 6

    def test_layout_unknown_group(self, client):
        response = client.get("/api/layout/cloud", params={"filter": "actors"})

        assert response.status_code == 400
        assert "actors" in response.json()["detail"]

    def test_layout_unknown_view(self, client):
        assert client.get("/api/layout/spiral").status_code == 404

    def test_layout_unknown_session(self, client):
        assert client.get("/api/layout/cloud", params={"session": "nope"}).status_code == 404
