"""Tests for conversation and message history endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fastapi.testclient import TestClient


class TestConversations:
    def test_create_and_list(self, client: TestClient, auth, other_auth):
        resp = client.post("/api/v1/conversations", json={"title": "ICP tweaks"}, headers=auth)
        assert resp.status_code == 201
        conversation = resp.json()
        assert conversation["title"] == "ICP tweaks"
        assert conversation["blueprintId"] is None

        listed = client.get("/api/v1/conversations", headers=auth).json()
        assert listed["total"] == 1
        assert client.get("/api/v1/conversations", headers=other_auth).json()["total"] == 0

    def test_append_and_read_messages(self, client: TestClient, auth):
        conversation = client.post("/api/v1/conversations", json={}, headers=auth).json()
        url = f"/api/v1/conversations/{conversation['id']}/messages"

        first = client.post(url, json={"role": "user", "content": "Shorten it"}, headers=auth)
        assert first.status_code == 201
        client.post(
            url,
            json={"role": "assistant", "content": "Done", "metadata": {"section": "icp"}},
            headers=auth,
        )

        data = client.get(url, headers=auth).json()
        assert data["total"] == 2
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
        assert data["messages"][1]["metadata"] == {"section": "icp"}

    def test_foreign_conversation_is_404(self, client: TestClient, auth, other_auth):
        conversation = client.post("/api/v1/conversations", json={}, headers=auth).json()
        url = f"/api/v1/conversations/{conversation['id']}/messages"

        assert client.get(url, headers=other_auth).status_code == 404
        resp = client.post(url, json={"role": "user", "content": "hi"}, headers=other_auth)
        assert resp.status_code == 404

    def test_linking_foreign_blueprint_is_404(self, client: TestClient, auth, other_auth):
        blueprint = client.post(
            "/api/v1/blueprints", json={"title": "Mine", "output": {}}, headers=auth
        ).json()
        resp = client.post(
            "/api/v1/conversations", json={"blueprintId": blueprint["id"]}, headers=other_auth
        )
        assert resp.status_code == 404
        assert client.get("/api/v1/conversations", headers=other_auth).json()["total"] == 0

    def test_invalid_role_is_400(self, client: TestClient, auth):
        conversation = client.post("/api/v1/conversations", json={}, headers=auth).json()
        resp = client.post(
            f"/api/v1/conversations/{conversation['id']}/messages",
            json={"role": "system", "content": "x"},
            headers=auth,
        )
        assert resp.status_code == 400
