"""Tests for the generic collection endpoints."""


def test_list_unknown_collection_is_empty(client):
    response = client.get("/api/widgets")
    assert response.status_code == 200
    assert response.json() == []


def test_create_assigns_fresh_id(client):
    """A caller-supplied id is ignored."""
    response = client.post("/api/submissions", json={"id": "mine", "answer": "42"})

    assert response.status_code == 200
    record = response.json()
    assert record["answer"] == "42"
    assert record["id"] != "mine"
    assert client.get("/api/submissions").json() == [record]


def test_update_merges_fields_and_keeps_id(client):
    created = client.post("/api/submissions", json={"answer": "1", "score": 0}).json()

    response = client.put(
        f"/api/submissions/{created['id']}", json={"score": 10, "id": "hijack"}
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated == {"answer": "1", "score": 10, "id": created["id"]}


def test_update_unknown_id_is_404(client):
    response = client.put("/api/submissions/123", json={"score": 1})

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "submissions not found"


def test_update_matches_numeric_stored_id(client, seed):
    """Path ids match records whose stored id is a number."""
    seed(submissions=[{"id": 77, "answer": "x"}])

    response = client.put("/api/submissions/77", json={"answer": "y"})

    assert response.status_code == 200
    assert response.json()["answer"] == "y"


def test_delete_always_confirms(client):
    created = client.post("/api/submissions", json={"answer": "1"}).json()

    first = client.delete(f"/api/submissions/{created['id']}")
    second = client.delete(f"/api/submissions/{created['id']}")

    assert first.status_code == 200 and first.json()["deleted"] == 1
    assert second.status_code == 200 and second.json()["deleted"] == 0
    assert client.get("/api/submissions").json() == []


def test_users_are_not_generically_writable(client):
    """Users go through /api/users/add so passwords are hashed."""
    response = client.post("/api/users", json={"email": "x@example.com", "password": "plain"})

    assert response.status_code in (404, 405)
    assert client.get("/api/users").json() == []


def test_write_to_unknown_collection_is_404(client):
    response = client.post("/api/widgets", json={"a": 1})
    assert response.status_code == 404
    assert response.json()["error"] == "Unknown collection: widgets"


def test_health_and_root_are_not_collections(client):
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.get("/").json()["health"] == "/api/health"
