"""Tests for course creation, lookup and cascade deletion."""

import io


def test_create_course_then_get_detail(client):
    """A new course comes back with empty lesson and assessment arrays."""
    created = client.post("/api/courses", json={"title": "Intro", "description": "desc"})

    assert created.status_code == 200
    course = created.json()["course"]
    assert course["title"] == "Intro"
    assert course["id"]
    assert course["uploadedBy"] == "S1234"

    detail = client.get(f"/api/courses/{course['id']}")
    assert detail.status_code == 200
    body = detail.json()
    assert body["title"] == "Intro"
    assert body["lessons"] == []
    assert body["assessments"] == []


def test_create_course_requires_title_and_description(client):
    response = client.post("/api/courses", json={"title": "Only title"})

    assert response.status_code == 400
    assert response.json()["error"] == "Course title and description required."


def test_create_course_from_form_with_image(client, storage):
    response = client.post(
        "/api/courses",
        data={"courseTitle": "Python", "courseDesc": "Basics", "userID": "S2000"},
        files={"courseImage": ("cover.png", io.BytesIO(b"\x89PNG"), "image/png")},
    )

    assert response.status_code == 200
    course = response.json()["course"]
    assert course["uploadedBy"] == "S2000"
    assert course["image"].startswith("/uploads/courses/")
    assert course["image"].endswith("-cover.png")
    assert storage.resolve_url(course["image"]).read_bytes() == b"\x89PNG"


def test_get_unknown_course_is_404(client):
    response = client.get("/api/courses/999")
    assert response.status_code == 404
    assert response.json()["error"] == "Course not found"


def test_list_courses_includes_titles(client, make_course, seed):
    course = make_course()
    seed(
        lessons=[{"id": "l1", "title": "Lesson one", "courseId": course["id"]}],
        assessments=[{"id": "a1", "title": "Quiz one", "courseId": course["id"]}],
    )

    listed = client.get("/api/courses").json()

    assert len(listed) == 1
    assert listed[0]["lessons"] == ["Lesson one"]
    assert listed[0]["assessments"] == ["Quiz one"]


def test_delete_course_cascades(client, make_course, seed, store):
    """Lessons and assessments of the course go with it; others stay."""
    course = make_course()
    other = make_course(title="Other")
    seed(
        lessons=[
            {"id": "l1", "courseId": course["id"]},
            {"id": "l2", "courseId": other["id"]},
        ],
        assessments=[{"id": "a1", "courseId": course["id"]}],
    )

    response = client.delete(f"/api/courses/{course['id']}")

    assert response.status_code == 200
    assert response.json()["removed"] == {"lessons": 1, "assessments": 1}
    document = store.load()
    assert [c["id"] for c in document.courses] == [other["id"]]
    assert [l["id"] for l in document.lessons] == ["l2"]
    assert document.assessments == []


def test_delete_course_removes_image(client, storage):
    created = client.post(
        "/api/courses",
        data={"courseTitle": "Python", "courseDesc": "Basics"},
        files={"courseImage": ("cover.png", io.BytesIO(b"img"), "image/png")},
    ).json()["course"]
    image_path = storage.resolve_url(created["image"])
    assert image_path.exists()

    client.delete(f"/api/courses/{created['id']}")

    assert not image_path.exists()


def test_delete_unknown_course_is_404(client):
    assert client.delete("/api/courses/404").status_code == 404
