"""Tests for the tutoring bot endpoints."""

import pytest

from conftest import BrokenChatModel, RecordingChatModel
from utils.llm_manager import (
    COMPILER_ASSISTANT_PROMPT,
    GENERAL_TUTOR_PROMPT,
    QUIZBOT_PROMPTS,
    build_ask_message,
    quizbot_prompt,
)


@pytest.fixture
def recording_llm(llm_manager, monkeypatch):
    model = RecordingChatModel(reply="  Recorded reply.  ")
    monkeypatch.setattr(llm_manager, "fixed_llm", model)
    return model


@pytest.fixture
def broken_llm(llm_manager, monkeypatch):
    monkeypatch.setattr(llm_manager, "fixed_llm", BrokenChatModel())


def test_quizbot_replies(client):
    response = client.post("/api/quizbot", json={"message": "Loops", "questionType": "mcq"})

    assert response.status_code == 200
    assert response.json() == {"reply": "Here is a helpful answer."}


@pytest.mark.parametrize("question_type", ["mcq", "essay", "code", "logic"])
def test_quizbot_uses_category_prompt(client, recording_llm, question_type):
    client.post("/api/quizbot", json={"message": "Topic", "questionType": question_type})

    system, user = recording_llm.calls[0]
    assert system.content == QUIZBOT_PROMPTS[question_type]
    assert user.content == "Topic"


def test_quizbot_unknown_category_uses_general_tutor(client, recording_llm):
    response = client.post("/api/quizbot", json={"message": "Hi", "questionType": "poetry"})

    assert response.json() == {"reply": "Recorded reply."}
    assert recording_llm.calls[0][0].content == GENERAL_TUTOR_PROMPT
    assert quizbot_prompt(None) == GENERAL_TUTOR_PROMPT


def test_quizbot_provider_failure(client, broken_llm):
    response = client.post("/api/quizbot", json={"message": "Hi", "questionType": "mcq"})

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "reply": "Error processing quiz or question request.",
    }


def test_ask_interpolates_prompt_and_output(client, recording_llm):
    response = client.post("/ask", json={"prompt": "Why?", "output": "Traceback ..."})

    assert response.status_code == 200
    system, user = recording_llm.calls[0]
    assert system.content == COMPILER_ASSISTANT_PROMPT
    assert user.content == (
        "User question: Why?\n\nProgram output:\nTraceback ...\n\n"
        "Respond with helpful feedback or guidance."
    )


def test_ask_without_output():
    assert "Program output:\n(no output)\n" in build_ask_message("Why?", "")


def test_ask_requires_prompt(client):
    response = client.post("/ask", json={"output": "x"})
    assert response.status_code == 400


def test_ask_provider_failure(client, broken_llm):
    response = client.post("/ask", json={"prompt": "Why?"})

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to get AI response."


def test_chat_embeds_knowledge_base(client, recording_llm, knowledge_base):
    knowledge_base.write_text("Office hours are on Friday.", encoding="utf-8")

    response = client.post("/api/chat", json={"message": "When are office hours?"})

    assert response.status_code == 200
    system, _ = recording_llm.calls[0]
    assert system.content.endswith("Knowledge base: Office hours are on Friday.")


def test_chat_without_knowledge_base(client, recording_llm):
    response = client.post("/api/chat", json={"message": "Hello"})

    assert response.status_code == 200
    assert recording_llm.calls[0][0].content == "You are a helpful assistant. Knowledge base: "


def test_chat_requires_message(client):
    assert client.post("/api/chat", json={"message": "  "}).status_code == 400
