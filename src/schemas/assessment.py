"""Assessment and question schema definitions."""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import Field

from core.identifiers import generate_id
from schemas.common import (
    CamelModel,
    Identifier,
    OptionalIdentifier,
    RecordModel,
    utc_now_iso,
)


class QuestionType(str, Enum):
    MCQ = "mcq"
    TEXTBOX = "textbox"
    CODE = "code"


class Question(RecordModel):
    id: Identifier = Field(default_factory=generate_id)
    question_number: int
    question_type: QuestionType
    question: str
    options: List[Any] = Field(default_factory=list)
    answer: Optional[str] = None
    expected_answer: Optional[str] = None
    points: int = 0


class Assessment(RecordModel):
    id: Identifier = Field(default_factory=generate_id)
    title: str
    type: str
    difficulty: str
    course_id: Identifier
    lesson_id: Identifier
    duration: Optional[Any] = None
    deadline: Optional[str] = None
    questions: List[Question] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now_iso)


class CreateAssessmentRequest(CamelModel):
    title: Optional[str] = None
    type: Optional[str] = None
    difficulty: Optional[str] = None
    course_id: OptionalIdentifier = None
    lesson_id: OptionalIdentifier = None
    duration: Optional[Any] = None
    deadline: Optional[str] = None
    questions: Optional[List[Question]] = None


class AppendQuestionRequest(CamelModel):
    """A single question submission.

    ``options`` arrives JSON-encoded from form posts; a list is accepted too.
    Numeric fields arrive as strings from forms and are parsed leniently.
    """

    assessment_id: OptionalIdentifier = None
    question_number: Optional[Union[int, str]] = None
    question_type: Optional[str] = None
    question: Optional[str] = None
    options: Optional[Union[str, List[Any]]] = None
    answer: Optional[str] = None
    expected_answer: Optional[str] = None
    points: Optional[Union[int, str]] = None
