"""Progress and assignment schema definitions."""

from typing import List, Optional

from pydantic import Field, field_validator

from core.identifiers import coerce_id, generate_id
from schemas.common import (
    CamelModel,
    Identifier,
    OptionalIdentifier,
    RecordModel,
    utc_now_iso,
)


class Progress(RecordModel):
    """Completion state of one (user, course) pair.

    ``opened_lessons`` and ``opened_assessments`` behave as ordered sets.
    """

    id: Identifier = Field(default_factory=generate_id)
    user_id: Identifier
    course_id: Identifier
    opened_lessons: List[str] = Field(default_factory=list)
    opened_assessments: List[str] = Field(default_factory=list)
    completion_rate: int = 0
    last_updated: str = Field(default_factory=utc_now_iso)

    @field_validator("opened_lessons", "opened_assessments", mode="before")
    @classmethod
    def dedupe_ids(cls, value):
        seen: List[str] = []
        for item in value or []:
            item_id = coerce_id(item)
            if item_id is not None and item_id not in seen:
                seen.append(item_id)
        return seen

    @property
    def opened_count(self) -> int:
        return len(self.opened_lessons) + len(self.opened_assessments)


class ProgressUpdateRequest(CamelModel):
    user_id: OptionalIdentifier = None
    course_id: OptionalIdentifier = None
    lesson_id: OptionalIdentifier = None
    assessment_id: OptionalIdentifier = None


class TraineeCourse(CamelModel):
    """A course card on the trainee dashboard."""

    id: str
    title: str
    description: str = ""
    image: str
    instructor: str
    completion_rate: int = 0


class Assignment(RecordModel):
    id: Identifier = Field(default_factory=generate_id)
    user_id: Identifier
    full_name: Optional[str] = None
    user_type: str = "Trainee"
    email: Optional[str] = None
    course_id: OptionalIdentifier = None
    course_title: str
    status: str = "Not Started"
    progress: str = "0%"
    assigned_date: str = Field(default_factory=utc_now_iso)


class AssignCourseRequest(CamelModel):
    user_id: OptionalIdentifier = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    course_id: OptionalIdentifier = None
    course_title: Optional[str] = None
    status: Optional[str] = None
    progress: Optional[str] = None


class ReassignCourseRequest(CamelModel):
    course_id: OptionalIdentifier = None
    status: Optional[str] = None
    progress: Optional[str] = None
