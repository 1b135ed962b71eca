"""Tutoring bot routes."""

import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from core.dependencies import LLMManagerDep
from core.exceptions import LLMError
from schemas.others import AskRequest, ChatReply, ChatRequest, QuizbotRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI"])


@router.post("/api/quizbot", response_model=ChatReply, summary="Quiz and question bot")
async def quizbot(req: QuizbotRequest, llm_manager: LLMManagerDep):
    """Answer with the canned prompt for the requested question type.

    Provider failures keep the bot's reply shape so the chat window can
    show the message.
    """
    try:
        reply = await llm_manager.quizbot(req.message, req.questionType)
    except LLMError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "reply": e.message},
        )
    return ChatReply(reply=reply)


@router.post("/ask", response_model=ChatReply, summary="Compiler assistant")
async def ask(req: AskRequest, llm_manager: LLMManagerDep) -> ChatReply:
    reply = await llm_manager.ask(req.prompt, req.output)
    return ChatReply(reply=reply)


@router.post("/api/chat", response_model=ChatReply, summary="General assistant")
async def chat(req: ChatRequest, llm_manager: LLMManagerDep) -> ChatReply:
    reply = await llm_manager.chat(req.message)
    return ChatReply(reply=reply)
