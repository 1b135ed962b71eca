"""Shared fixtures: an app client wired to per-test storage and a fake LLM."""

import os
import tempfile

# Point the configured data directory somewhere disposable before config loads
os.environ["LMS_DATA_DIR"] = tempfile.mkdtemp(prefix="lms-test-data-")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from langchain_core.language_models.fake_chat_models import FakeListChatModel  # noqa: E402
from langchain_core.messages import AIMessage  # noqa: E402

from app import app  # noqa: E402
from core import dependencies  # noqa: E402
from core.document_store import DocumentStore  # noqa: E402
from utils.lesson_page import LessonPageRenderer  # noqa: E402
from utils.llm_manager import LLMManager, get_llm_manager  # noqa: E402
from utils.storage import UploadStorage  # noqa: E402


class RecordingChatModel:
    """Chat model stand-in that remembers the messages it was sent."""

    def __init__(self, reply="Recorded reply."):
        self.reply = reply
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        return AIMessage(content=self.reply)


class BrokenChatModel:
    """Chat model stand-in whose provider is always down."""

    async def ainvoke(self, messages):
        raise RuntimeError("provider unavailable")


@pytest.fixture
def store(tmp_path):
    """Document store rooted in the test's temporary directory."""
    return DocumentStore(tmp_path / "db" / "database.json")


@pytest.fixture
def storage(tmp_path):
    upload_storage = UploadStorage(tmp_path / "uploads")
    upload_storage.ensure_dirs()
    return upload_storage


@pytest.fixture
def renderer(tmp_path):
    return LessonPageRenderer(output_dir=tmp_path / "public" / "lessons")


@pytest.fixture
def knowledge_base(tmp_path):
    return tmp_path / "api.knowledge.txt"


@pytest.fixture
def fake_llm():
    return FakeListChatModel(responses=["Here is a helpful answer."])


@pytest.fixture
def llm_manager(fake_llm, knowledge_base):
    return LLMManager(llm=fake_llm, knowledge_base_path=knowledge_base)


@pytest.fixture
def client(store, storage, renderer, llm_manager):
    """TestClient with storage, rendering and the LLM replaced per test."""
    app.dependency_overrides[dependencies.get_document_store] = lambda: store
    app.dependency_overrides[dependencies.get_upload_storage] = lambda: storage
    app.dependency_overrides[dependencies.get_lesson_page_renderer] = lambda: renderer
    app.dependency_overrides[get_llm_manager] = lambda: llm_manager
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_course(client):
    """Create a course through the API and return its record."""

    def _make_course(title="Intro", description="desc"):
        response = client.post("/api/courses", json={"title": title, "description": description})
        assert response.status_code == 200
        return response.json()["course"]

    return _make_course


@pytest.fixture
def seed(store):
    """Write raw records straight into the document store."""

    def _seed(**collections):
        with store.transaction() as document:
            for name, records in collections.items():
                document.get_collection(name).extend(records)

    return _seed
