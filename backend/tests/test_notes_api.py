"""
Notemail Backend — Notes API Tests
==================================

What:  HTTP-level tests for /api/notes through the full middleware stack.
How:   HTTPX AsyncClient over ASGITransport; the database dependency is
       overridden with the in-memory SQLite session from conftest.
"""

import pytest


async def _create(client, title="Title", content="Content"):
    response = await client.post("/api/notes", json={"title": title, "content": content})
    assert response.status_code == 201
    return response.json()


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_server_fields(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "Groceries", "content": "Milk"}
        )

        assert response.status_code == 201
        body = response.json()
        assert isinstance(body["id"], int)
        assert body["title"] == "Groceries"
        assert body["content"] == "Milk"
        assert body["created_at"] == body["updated_at"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"title": "Only title"},
            {"content": "Only content"},
            {"title": "", "content": "x"},
            {"title": "x", "content": "  "},
            {},
        ],
    )
    async def test_missing_fields_return_400(self, test_client, payload):
        response = await test_client.post("/api/notes", json=payload)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_input"
        assert body["message"] == "Title and content are required"

        listed = await test_client.get("/api/notes")
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_empty_body_returns_400(self, test_client):
        response = await test_client.post("/api/notes")

        assert response.status_code == 400
        assert response.json()["message"] == "Title and content are required"

    @pytest.mark.asyncio
    async def test_malformed_json_returns_400(self, test_client):
        response = await test_client.post(
            "/api/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"

    @pytest.mark.asyncio
    async def test_overlong_title_returns_400(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "t" * 256, "content": "body"}
        )

        assert response.status_code == 400


class TestReadNotes:

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_by_id(self, test_client):
        created = await _create(test_client, "Read me", "Body")

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_unknown_id_returns_404(self, test_client):
        response = await test_client.get("/api/notes/999")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_non_integer_id_returns_400(self, test_client):
        response = await test_client.get("/api/notes/abc")

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_list_is_most_recently_updated_first(self, test_client):
        first = await _create(test_client, "First", "1")
        second = await _create(test_client, "Second", "2")

        listed = await test_client.get("/api/notes")
        assert [n["id"] for n in listed.json()] == [second["id"], first["id"]]

        await test_client.put(
            f"/api/notes/{first['id']}", json={"title": "First", "content": "edited"}
        )

        listed = await test_client.get("/api/notes")
        assert [n["id"] for n in listed.json()] == [first["id"], second["id"]]


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_keeps_created_at(self, test_client):
        created = await _create(test_client, "Draft", "v1")

        response = await test_client.put(
            f"/api/notes/{created['id']}", json={"title": "Final", "content": "v2"}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["title"] == "Final"
        assert body["content"] == "v2"
        assert body["created_at"] == created["created_at"]
        assert body["updated_at"] >= created["updated_at"]

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_404(self, test_client):
        response = await test_client.put(
            "/api/notes/999", json={"title": "t", "content": "c"}
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_with_missing_fields_returns_400(self, test_client):
        created = await _create(test_client)

        response = await test_client.put(
            f"/api/notes/{created['id']}", json={"title": "Only title"}
        )

        assert response.status_code == 400
        fetched = await test_client.get(f"/api/notes/{created['id']}")
        assert fetched.json()["content"] == "Content"


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_then_get_returns_404(self, test_client):
        created = await _create(test_client)

        response = await test_client.delete(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully"}
        assert (await test_client.get(f"/api/notes/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_second_delete_returns_404(self, test_client):
        created = await _create(test_client)
        await test_client.delete(f"/api/notes/{created['id']}")

        response = await test_client.delete(f"/api/notes/{created['id']}")

        assert response.status_code == 404


class TestClientAndHeaders:

    @pytest.mark.asyncio
    async def test_root_serves_client_document(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert 'id="notes-list"' in response.text

    @pytest.mark.asyncio
    async def test_client_script_is_served(self, test_client):
        response = await test_client.get("/static/app.js")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get(
            "/api/notes", headers={"X-Request-ID": "abc123"}
        )

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get(
            "/api/notes/999", headers={"X-Request-ID": "trace-me"}
        )

        assert response.json()["request_id"] == "trace-me"

    @pytest.mark.asyncio
    async def test_client_keeps_compose_fields_in_state(self, test_client):
        script = (await test_client.get("/static/app.js")).text

        assert "composeEdited:" in script
        assert "dispatch('composeEdited', { to: emailTo.value })" in script
        assert "dispatch('composeEdited', { subject: emailSubject.value })" in script
