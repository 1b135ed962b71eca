"""LLM instance management and the tutoring bots built on it.

This module resolves the configured OpenAI-compatible provider, caches one
chat model per output-token budget, and holds the canned system prompts
used by the quiz bot, the compiler assistant and the general chat.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from config import (
    AI_KNOWLEDGE_BASE_PATH,
    AI_MODEL,
    AI_TEMPERATURE,
    ASK_MAX_TOKENS,
    CHAT_MAX_TOKENS,
    DEFAULT_LLM_PROVIDER,
    LLM_PROVIDERS,
    QUIZBOT_MAX_TOKENS,
)
from core.exceptions import LLMError, ValidationError

logger = logging.getLogger(__name__)

QUIZBOT_PROMPTS: Dict[str, str] = {
    "mcq": (
        "You are an AI that creates multiple-choice questions.\n"
        "Given a topic or concept, generate a challenging and well-structured MCQ.\n"
        "Always provide 4 options (A, B, C, D) and specify the correct answer "
        "with an explanation."
    ),
    "essay": (
        "You are an AI that helps create essay-type questions or essay-style answers.\n"
        "Write thoughtful, open-ended questions that assess deep understanding.\n"
        "When asked to answer, write in a clear and academic tone."
    ),
    "code": (
        "You are an expert programming tutor.\n"
        "Explain programming concepts, debug code, or create coding challenges.\n"
        "Provide example code when helpful and explain logic clearly."
    ),
    "logic": (
        "You are an AI specialized in logical reasoning and problem-solving.\n"
        "When given a scenario or question, respond step-by-step and explain "
        "the reasoning clearly."
    ),
}

GENERAL_TUTOR_PROMPT = (
    "You are a helpful AI tutor that can answer technical and academic questions.\n"
    "Respond clearly and concisely, tailoring the response to the user's topic."
)

COMPILER_ASSISTANT_PROMPT = (
    "You are a helpful AI coding assistant. Analyze compiler output, "
    "help debug code, and guide users clearly."
)

CHAT_PROMPT_TEMPLATE = "You are a helpful assistant. Knowledge base: {knowledge}"

QUIZBOT_ERROR_MESSAGE = "Error processing quiz or question request."
ASK_ERROR_MESSAGE = "Failed to get AI response."

_llm_manager_instance: Optional["LLMManager"] = None


def get_llm_manager() -> "LLMManager":
    """Return a singleton LLMManager instance."""
    global _llm_manager_instance
    if _llm_manager_instance is None:
        _llm_manager_instance = LLMManager()
    return _llm_manager_instance


def quizbot_prompt(question_type: Optional[str]) -> str:
    """System prompt for a quiz bot category; unknown categories get the tutor."""
    return QUIZBOT_PROMPTS.get((question_type or "").strip().lower(), GENERAL_TUTOR_PROMPT)


def build_ask_message(prompt: str, output: Optional[str]) -> str:
    return (
        f"User question: {prompt}\n\n"
        f"Program output:\n{output or '(no output)'}\n\n"
        "Respond with helpful feedback or guidance."
    )


def load_knowledge_base(path: Path = AI_KNOWLEDGE_BASE_PATH) -> str:
    """Read the chat knowledge base; an absent file yields an empty string."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.warning("No knowledge base file found at %s; continuing without it.", path)
        return ""
    except OSError as e:
        logger.warning("Could not read knowledge base %s: %s", path, e)
        return ""


class LLMManager:
    """Manages active LLM instances and runs single-turn completions."""

    def __init__(
        self,
        llm: Optional[BaseChatModel] = None,
        provider: str = DEFAULT_LLM_PROVIDER,
        model: Optional[str] = AI_MODEL,
        knowledge_base_path: Path = AI_KNOWLEDGE_BASE_PATH,
    ) -> None:
        """Initialize LLMManager.

        Args:
            llm: A ready chat model to use for every request instead of
                building one from the provider registry.
            provider: Key into LLM_PROVIDERS.
            model: Overrides the provider's default model.
            knowledge_base_path: Text file embedded in the chat prompt.
        """
        if llm is None and provider not in LLM_PROVIDERS:
            raise ValueError(f"Unsupported provider: {provider}")
        self.fixed_llm = llm
        self.provider = provider
        self.model = model
        self.knowledge_base_path = knowledge_base_path
        self.active_llms: Dict[int, BaseChatModel] = {}
        logger.info("LLMManager initialized (provider=%s)", provider if llm is None else "injected")

    def get_llm(self, max_tokens: int) -> BaseChatModel:
        """Get a chat model limited to max_tokens output tokens."""
        if self.fixed_llm is not None:
            return self.fixed_llm
        cached = self.active_llms.get(max_tokens)
        if cached:
            return cached

        settings = LLM_PROVIDERS[self.provider]
        env_key = settings["env_key"]
        kwargs = {
            "model": self.model or settings["default_model"],
            "api_key": os.getenv(env_key) if env_key else None,
            "temperature": AI_TEMPERATURE,
            "max_tokens": max_tokens,
        }
        if settings["base_url"]:
            kwargs["base_url"] = settings["base_url"]

        llm = ChatOpenAI(**kwargs)
        self.active_llms[max_tokens] = llm
        return llm

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        max_tokens: int,
        error_message: str = ASK_ERROR_MESSAGE,
    ) -> str:
        """Send one system + user exchange and return the reply text.

        Raises:
            LLMError: If the model cannot be built or the request fails.
        """
        messages = [SystemMessage(content=system_prompt), HumanMessage(content=user_message)]
        try:
            response = await self.get_llm(max_tokens).ainvoke(messages)
        except Exception as e:
            logger.error("LLM request failed: %s", e, exc_info=True)
            raise LLMError(error_message) from e
        content = response.content
        return content.strip() if isinstance(content, str) else str(content)

    async def quizbot(self, message: Optional[str], question_type: Optional[str]) -> str:
        return await self.complete(
            quizbot_prompt(question_type),
            message or "",
            QUIZBOT_MAX_TOKENS,
            error_message=QUIZBOT_ERROR_MESSAGE,
        )

    async def ask(self, prompt: Optional[str], output: Optional[str]) -> str:
        """Ask the compiler assistant about a program and its output.

        Raises:
            ValidationError: If prompt is empty.
            LLMError: If the provider fails.
        """
        if not prompt:
            raise ValidationError("Prompt required")
        return await self.complete(
            COMPILER_ASSISTANT_PROMPT, build_ask_message(prompt, output), ASK_MAX_TOKENS
        )

    async def chat(self, message: Optional[str]) -> str:
        if not message or not message.strip():
            raise ValidationError("Message required")
        knowledge = load_knowledge_base(self.knowledge_base_path)
        reply = await self.complete(
            CHAT_PROMPT_TEMPLATE.format(knowledge=knowledge), message, CHAT_MAX_TOKENS
        )
        return reply or "No response generated."
