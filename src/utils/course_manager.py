"""Course and lesson management.

Lessons and assessments point at their course through ``courseId``;
deleting a course removes both along with the course image.
"""

import logging
from typing import Any, Dict, List, Optional

from config import DEFAULT_UPLOADER_ID
from core.document_store import DocumentStore
from core.exceptions import NotFoundError, ValidationError
from core.identifiers import coerce_id, ids_equal
from schemas.course import Course, CreateCourseRequest, Lesson
from schemas.document import Document, Record
from utils.content_router import ContentRouter, UploadedFile
from utils.storage import UploadStorage

logger = logging.getLogger(__name__)


def find_record(records: List[Record], record_id: Any) -> Optional[Record]:
    """First record whose id matches, or None."""
    for record in records:
        if ids_equal(record.get("id"), record_id):
            return record
    return None


class CourseManager:
    """Manages courses and their lessons."""

    def __init__(self, store: DocumentStore, storage: UploadStorage):
        """Initialize CourseManager.

        Args:
            store: The document store.
            storage: Upload storage for course images and lesson files.
        """
        self.store = store
        self.storage = storage

    # --- Courses ---

    def create_course(
        self, req: CreateCourseRequest, image: Optional[UploadedFile] = None
    ) -> Course:
        """Create a course, storing its image if one was uploaded.

        Raises:
            ValidationError: If title or description is missing.
        """
        title = (req.title or "").strip()
        description = (req.description or "").strip()
        if not title or not description:
            raise ValidationError("Course title and description required.")

        image_url = None
        if image is not None and image.filename:
            stored = self.storage.save_stream(
                self.storage.courses_dir, image.filename, image.stream
            )
            image_url = self.storage.public_url(stored)

        course = Course(
            title=title,
            description=description,
            image=image_url,
            uploaded_by=req.uploaded_by or DEFAULT_UPLOADER_ID,
        )
        with self.store.transaction() as document:
            document.courses.append(course.to_record())
        logger.info("Created course %s (%s)", course.id, course.title)
        return course

    def list_courses(self) -> List[Dict[str, Any]]:
        """Every course with the titles of its lessons and assessments."""
        document = self.store.load()
        return [
            {
                **course,
                "lessons": [
                    l.get("title")
                    for l in document.lessons
                    if ids_equal(l.get("courseId"), course.get("id"))
                ],
                "assessments": [
                    a.get("title")
                    for a in document.assessments
                    if ids_equal(a.get("courseId"), course.get("id"))
                ],
            }
            for course in document.courses
        ]

    def get_course_detail(self, course_id: str) -> Dict[str, Any]:
        """The course with its full lesson and assessment records.

        Raises:
            NotFoundError: If the course does not exist.
        """
        document = self.store.load()
        course = find_record(document.courses, course_id)
        if course is None:
            raise NotFoundError("Course not found")
        return {
            **course,
            "lessons": _owned_by(document.lessons, course_id),
            "assessments": _owned_by(document.assessments, course_id),
        }

    def delete_course(self, course_id: str) -> Dict[str, int]:
        """Delete a course, its lessons and assessments, and its image file.

        Returns:
            Counts of removed lessons and assessments.

        Raises:
            NotFoundError: If the course does not exist.
        """
        with self.store.transaction() as document:
            course = find_record(document.courses, course_id)
            if course is None:
                raise NotFoundError("Course not found")
            removed = _cascade_delete(document, course_id)
        self.storage.remove_url(course.get("image"))
        logger.info(
            "Deleted course %s with %d lesson(s) and %d assessment(s)",
            course_id,
            removed["lessons"],
            removed["assessments"],
        )
        return removed

    # --- Lessons ---

    def create_lesson(
        self,
        course_id: Any,
        files: List[UploadedFile],
        title: Optional[str] = None,
        description: Optional[str] = None,
        uploaded_by: Optional[str] = None,
    ) -> Lesson:
        """Create a lesson from uploaded files.

        Raises:
            ValidationError: If no files were uploaded or course_id is missing.
            NotFoundError: If the course does not exist.
        """
        if not files:
            raise ValidationError("No files uploaded.")
        normalized_course_id = coerce_id(course_id)
        if normalized_course_id is None:
            raise ValidationError("Invalid or missing course ID.")
        if find_record(self.store.load().courses, normalized_course_id) is None:
            raise NotFoundError("Course not found")

        content, attached = ContentRouter(self.storage).route(files)
        lesson = Lesson(
            title=(title or "").strip() or "Untitled Lesson",
            description=(description or "").strip(),
            course_id=normalized_course_id,
            content=content,
            uploaded_by=uploaded_by or DEFAULT_UPLOADER_ID,
        )
        with self.store.transaction() as document:
            document.lessons.append(lesson.to_record())
        logger.info(
            "Created lesson %s in course %s with %d file(s)",
            lesson.id,
            normalized_course_id,
            attached,
        )
        return lesson

    def store_content(self, upload: UploadedFile, **metadata: Any) -> Dict[str, Any]:
        """Store a single content file without attaching it to a lesson.

        Returns:
            The stored file's names and URL merged with the given metadata.
        """
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded")
        router = ContentRouter(self.storage)
        stored = self.storage.save_stream(
            router.directory_for(upload.filename), upload.filename, upload.stream
        )
        logger.info("Stored content file %s", stored.name)
        return {
            "fileName": stored.name,
            "originalName": upload.filename,
            **metadata,
            "path": self.storage.public_url(stored),
        }

    def list_lessons(self, course_id: Optional[str] = None) -> List[Record]:
        lessons = self.store.load().lessons
        if course_id:
            return _owned_by(lessons, course_id)
        return lessons

    def get_lesson(self, lesson_id: str) -> Lesson:
        """Raises NotFoundError if the lesson does not exist."""
        record = find_record(self.store.load().lessons, lesson_id)
        if record is None:
            raise NotFoundError("Lesson not found")
        return Lesson.model_validate(record)


def _owned_by(records: List[Record], course_id: Any) -> List[Record]:
    return [r for r in records if ids_equal(r.get("courseId"), course_id)]


def _cascade_delete(document: Document, course_id: Any) -> Dict[str, int]:
    lessons = [l for l in document.lessons if not ids_equal(l.get("courseId"), course_id)]
    assessments = [
        a for a in document.assessments if not ids_equal(a.get("courseId"), course_id)
    ]
    removed = {
        "lessons": len(document.lessons) - len(lessons),
        "assessments": len(document.assessments) - len(assessments),
    }
    document.lessons = lessons
    document.assessments = assessments
    document.courses = [c for c in document.courses if not ids_equal(c.get("id"), course_id)]
    return removed
