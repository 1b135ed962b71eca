"""Course and lesson schema definitions."""

from typing import List, Optional

from pydantic import AliasChoices, Field

from config import DEFAULT_UPLOADER_ID
from core.identifiers import generate_id
from schemas.common import CamelModel, Identifier, RecordModel, utc_now_iso


class Course(RecordModel):
    id: Identifier = Field(default_factory=generate_id)
    title: str
    description: str = ""
    image: Optional[str] = None
    created_at: str = Field(default_factory=utc_now_iso)
    uploaded_by: str = DEFAULT_UPLOADER_ID
    status: str = "Active"


class CreateCourseRequest(CamelModel):
    """Accepts both the form field names and the plain record names."""

    title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("courseTitle", "title")
    )
    description: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("courseDesc", "description")
    )
    uploaded_by: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("userID", "uploadedBy")
    )


class LessonContent(CamelModel):
    """Categorized file references of a lesson."""

    handout: Optional[str] = None
    videos: List[str] = Field(default_factory=list)
    powerpoints: List[str] = Field(default_factory=list)


class Lesson(RecordModel):
    id: Identifier = Field(default_factory=generate_id)
    title: str = "Untitled Lesson"
    description: str = ""
    course_id: Identifier
    content: LessonContent = Field(default_factory=LessonContent)
    uploaded_by: str = DEFAULT_UPLOADER_ID
    uploaded_at: str = Field(default_factory=utc_now_iso)
