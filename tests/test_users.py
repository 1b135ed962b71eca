"""Tests for user registration and the archive lifecycle."""

import re

import pytest


def _add_user(client, email="ana@example.com", user_type="Trainee", name="Ana Cruz"):
    return client.post(
        "/api/users/add",
        json={"fullName": name, "userType": user_type, "email": email, "password": "s3cret"},
    )


@pytest.fixture
def trainee(client):
    response = _add_user(client)
    assert response.status_code == 201
    return response.json()["user"]


def test_add_user_hashes_password_and_generates_id(trainee, store):
    assert re.fullmatch(r"T\d{4}", trainee["userId"])
    assert "password" not in trainee
    assert trainee["status"] == "Active"
    stored = store.load().users[0]
    assert stored["password"] != "s3cret"
    assert stored["password"].startswith("$2")


@pytest.mark.parametrize("user_type, prefix", [("Admin", "A"), ("SME", "S")])
def test_user_id_prefix_follows_role(client, user_type, prefix):
    user = _add_user(client, email=f"{prefix}@example.com", user_type=user_type).json()["user"]
    assert user["userId"].startswith(prefix)


def test_add_user_missing_fields(client):
    response = client.post("/api/users/add", json={"fullName": "X", "email": "x@example.com"})

    assert response.status_code == 400
    assert response.json()["error"] == "All fields are required (fullName, userType, email, password)."


def test_add_user_unknown_role(client):
    response = _add_user(client, user_type="Wizard")
    assert response.status_code == 400


def test_duplicate_email_is_conflict(client, trainee, store):
    """Emails are compared case-insensitively and the store is unchanged."""
    response = _add_user(client, email="ANA@example.com", name="Other")

    assert response.status_code == 409
    assert response.json()["error"] == "Email already registered."
    assert len(store.load().users) == 1


def test_list_and_get_users_hide_passwords(client, trainee):
    listed = client.get("/api/users").json()
    assert [u["userId"] for u in listed] == [trainee["userId"]]
    assert all("password" not in u for u in listed)

    fetched = client.get(f"/api/users/{trainee['userId']}")
    assert fetched.status_code == 200
    assert "password" not in fetched.json()


def test_archive_and_restore(client, trainee):
    user_id = trainee["userId"]

    archived = client.patch(f"/api/users/{user_id}/archive")
    assert archived.status_code == 200
    assert archived.json()["user"]["status"] == "Archived"
    assert archived.json()["user"]["dateArchived"]
    assert client.get(f"/api/users/{user_id}").status_code == 404
    assert [u["userId"] for u in client.get("/api/archived-users").json()] == [user_id]

    again = client.patch(f"/api/users/{user_id}/archive")
    assert again.status_code == 400
    assert again.json()["error"] == "User is already archived."

    restored = client.patch(f"/api/archived-users/restore/{user_id}")
    assert restored.status_code == 200
    assert restored.json()["user"]["status"] == "Active"
    assert restored.json()["user"]["dateArchived"] is None

    not_archived = client.patch(f"/api/archived-users/restore/{user_id}")
    assert not_archived.status_code == 400
    assert not_archived.json()["error"] == "User is not archived."


def test_archive_unknown_user_is_404(client):
    assert client.patch("/api/users/T0000/archive").status_code == 404


def test_restore_all(client):
    ids = [
        _add_user(client, email=f"u{i}@example.com").json()["user"]["userId"] for i in range(2)
    ]
    for user_id in ids:
        client.patch(f"/api/users/{user_id}/archive")

    response = client.patch("/api/archived-users/restore-all")

    assert response.status_code == 200
    assert response.json()["restored"] == 2
    assert client.get("/api/archived-users").json() == []


def test_purge_only_archived_users(client, trainee, store):
    user_id = trainee["userId"]

    active = client.delete(f"/api/archived-users/{user_id}")
    assert active.status_code == 404
    assert active.json()["error"] == "Archived user not found."

    client.patch(f"/api/users/{user_id}/archive")
    purged = client.delete(f"/api/archived-users/{user_id}")
    assert purged.status_code == 200
    assert store.load().users == []


def test_delete_all_archived(client, trainee):
    keep = _add_user(client, email="keep@example.com").json()["user"]
    client.patch(f"/api/users/{trainee['userId']}/archive")

    response = client.delete("/api/archived-users/delete-all")

    assert response.status_code == 200
    assert response.json()["deleted"] == 1
    assert [u["userId"] for u in client.get("/api/users").json()] == [keep["userId"]]


def test_generated_user_id_skips_taken_ids(client, seed, monkeypatch):
    """A random id that is already in use is drawn again."""
    seed(users=[{"userId": "T1234", "email": "old@example.com", "status": "Active"}])
    draws = iter([234, 234, 235])
    monkeypatch.setattr("utils.user_manager.secrets.randbelow", lambda n: next(draws))

    user = _add_user(client).json()["user"]

    assert user["userId"] == "T1235"
