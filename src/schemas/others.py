from typing import Optional

from pydantic import BaseModel, Field


# code execution
class CompileRequest(BaseModel):
    language: Optional[str] = Field(default=None, description="Language tag, e.g. 'python'.")
    code: Optional[str] = Field(default=None, description="Source code to run.")


class CompileResult(BaseModel):
    success: bool
    output: str


# tutoring bots
class QuizbotRequest(BaseModel):
    message: Optional[str] = None
    questionType: Optional[str] = Field(
        default=None,
        description="Prompt category: 'mcq', 'essay', 'code', 'logic'; anything else uses the general tutor.",
    )


class AskRequest(BaseModel):
    prompt: Optional[str] = None
    output: Optional[str] = Field(default=None, description="Captured program output.")


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatReply(BaseModel):
    reply: str
