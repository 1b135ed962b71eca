"""Tests for lesson uploads, content routing and the lesson page."""

import io

from utils.content_router import ContentKind, classify


def _upload(name, data=b"data"):
    return ("lessonFiles", (name, io.BytesIO(data), "application/octet-stream"))


def test_classify_by_extension():
    assert classify("notes.PDF") is ContentKind.HANDOUT
    assert classify("slides.pptx") is ContentKind.POWERPOINT
    assert classify("clip.mkv") is ContentKind.VIDEO
    assert classify("archive.zip") is None


def test_create_lesson_routes_files_by_kind(client, make_course, storage):
    course = make_course()

    response = client.post(
        "/api/lessons",
        data={"lessonTitle": "Week 1", "lessonCourse": course["id"], "lessonDesc": "Start"},
        files=[
            _upload("notes.pdf"),
            _upload("extra.docx"),
            _upload("slides.ppt"),
            _upload("talk.mp4"),
            _upload("archive.zip"),
        ],
    )

    assert response.status_code == 200
    lesson = response.json()["lesson"]
    assert lesson["title"] == "Week 1"
    assert lesson["courseId"] == course["id"]
    content = lesson["content"]
    assert content["handout"].startswith("/uploads/lessons/handouts/")
    assert content["handout"].endswith("-notes.pdf")
    assert len(content["powerpoints"]) == 1
    assert content["powerpoints"][0].startswith("/uploads/lessons/powerpoints/")
    assert len(content["videos"]) == 1
    # Unrecognized files are stored but not attached
    attached = [content["handout"], *content["powerpoints"], *content["videos"]]
    assert not any("archive.zip" in url for url in attached)
    assert any(p.name.endswith("-archive.zip") for p in storage.lessons_dir.iterdir())


def test_create_lesson_without_files_is_400(client, make_course):
    course = make_course()
    response = client.post("/api/lessons", data={"lessonCourse": course["id"]})

    assert response.status_code == 400
    assert response.json()["error"] == "No files uploaded."


def test_create_lesson_without_course_is_400(client):
    response = client.post("/api/lessons", files=[_upload("notes.pdf")])

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid or missing course ID."


def test_create_lesson_for_unknown_course_is_404(client):
    response = client.post(
        "/api/lessons", data={"lessonCourse": "999"}, files=[_upload("notes.pdf")]
    )
    assert response.status_code == 404


def test_lesson_defaults_and_lookup(client, make_course):
    course = make_course()
    lesson = client.post(
        "/api/lessons", data={"lessonCourse": course["id"]}, files=[_upload("a.pdf")]
    ).json()["lesson"]

    assert lesson["title"] == "Untitled Lesson"
    fetched = client.get(f"/api/lessons/{lesson['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["id"] == lesson["id"]
    assert client.get("/api/lessons", params={"courseId": course["id"]}).json() == [lesson]
    assert client.get("/api/lessons/nope").status_code == 404


def test_upload_content_echoes_metadata(client):
    response = client.post(
        "/api/upload-content",
        data={"type": "video", "courseId": "5", "lessonId": "9", "description": "Demo"},
        files={"contentFile": ("demo.mov", io.BytesIO(b"v"), "video/quicktime")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["originalName"] == "demo.mov"
    assert body["fileName"].endswith("-demo.mov")
    assert body["courseId"] == "5"
    assert body["path"].startswith("/uploads/lessons/videos/")


def test_upload_content_without_file_is_400(client):
    response = client.post("/api/upload-content", data={"type": "video"})
    assert response.status_code == 400


def test_lesson_page_is_rendered_and_cached(client, make_course, renderer):
    course = make_course()
    lesson = client.post(
        "/api/lessons",
        data={
            "lessonCourse": course["id"],
            "lessonTitle": "Loops & <Lists>",
            "lessonDesc": "Iteration",
        },
        files=[_upload("loops.pdf")],
    ).json()["lesson"]

    response = client.get(f"/lesson/{lesson['id']}")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text
    assert "Loops &amp; &lt;Lists&gt;" in html
    assert lesson["content"]["handout"] in html
    # No videos or slides
    assert html.count("<p>None</p>") == 2
    cached = renderer.output_dir / f"{lesson['id']}.html"
    assert cached.read_text(encoding="utf-8") == html


def test_lesson_page_unknown_lesson_is_404(client):
    assert client.get("/lesson/12345").status_code == 404
