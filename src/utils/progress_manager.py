"""Progress tracking.

A progress record holds the lessons and assessments a user has opened in a
course. Its completion rate is always recomputed from the course's current
lesson and assessment counts, so adding or removing course content changes
every trainee's percentage.
"""

import logging
import math
import re
from typing import List, Optional, Tuple

from config import DEFAULT_COURSE_IMAGE
from core.document_store import DocumentStore
from core.exceptions import ValidationError
from core.identifiers import ids_equal
from schemas.common import utc_now_iso
from schemas.document import Document
from schemas.progress import Progress, TraineeCourse

logger = logging.getLogger(__name__)


def completion_rate(opened: int, total: int) -> int:
    """Percentage of opened items, rounded half up and capped at 100; 0 when total is 0."""
    if total <= 0:
        return 0
    return min(100, int(math.floor(100 * opened / total + 0.5)))


def course_item_counts(document: Document, course_id: str) -> Tuple[int, int]:
    """Number of lessons and assessments belonging to a course."""
    lessons = sum(1 for l in document.lessons if ids_equal(l.get("courseId"), course_id))
    assessments = sum(
        1 for a in document.assessments if ids_equal(a.get("courseId"), course_id)
    )
    return lessons, assessments


class ProgressManager:
    """Manages per-user, per-course progress records."""

    def __init__(self, store: DocumentStore):
        """Initialize ProgressManager.

        Args:
            store: The document store.
        """
        self.store = store

    @staticmethod
    def _find_index(document: Document, user_id: str, course_id: str) -> Optional[int]:
        for index, record in enumerate(document.progress):
            if ids_equal(record.get("userId"), user_id) and ids_equal(
                record.get("courseId"), course_id
            ):
                return index
        return None

    def _get_or_create(
        self, document: Document, user_id: str, course_id: str
    ) -> Tuple[int, Progress]:
        index = self._find_index(document, user_id, course_id)
        if index is not None:
            return index, Progress.model_validate(document.progress[index])
        progress = Progress(user_id=user_id, course_id=course_id)
        document.progress.append(progress.to_record())
        logger.info("Created progress record for user %s in course %s", user_id, course_id)
        return len(document.progress) - 1, progress

    @staticmethod
    def _recompute(document: Document, progress: Progress) -> None:
        lessons, assessments = course_item_counts(document, progress.course_id)
        progress.completion_rate = completion_rate(
            progress.opened_count, lessons + assessments
        )
        progress.last_updated = utc_now_iso()

    @staticmethod
    def _require_ids(user_id: Optional[str], course_id: Optional[str]) -> None:
        if not user_id or not course_id:
            raise ValidationError("userId and courseId required.")

    def get_or_init(self, user_id: str, course_id: str, refresh: bool = True) -> Progress:
        """Return the progress record, creating an empty one if missing.

        Args:
            user_id: The user's id.
            course_id: The course id.
            refresh: Recompute the completion rate from current course counts.

        Returns:
            The stored Progress.
        """
        self._require_ids(user_id, course_id)
        with self.store.transaction() as document:
            index, progress = self._get_or_create(document, user_id, course_id)
            if refresh:
                self._recompute(document, progress)
            document.progress[index] = progress.to_record()
        return progress

    def record_opened(
        self,
        user_id: Optional[str],
        course_id: Optional[str],
        lesson_id: Optional[str] = None,
        assessment_id: Optional[str] = None,
    ) -> Progress:
        """Mark a lesson and/or assessment as opened and recompute the rate.

        Supplying neither id still recomputes and persists the record.

        Raises:
            ValidationError: If user_id or course_id is missing.
        """
        self._require_ids(user_id, course_id)
        with self.store.transaction() as document:
            index, progress = self._get_or_create(document, user_id, course_id)
            if lesson_id and lesson_id not in progress.opened_lessons:
                progress.opened_lessons.append(lesson_id)
            if assessment_id and assessment_id not in progress.opened_assessments:
                progress.opened_assessments.append(assessment_id)
            self._recompute(document, progress)
            document.progress[index] = progress.to_record()
        logger.info(
            "Progress of user %s in course %s: %d%%",
            user_id,
            course_id,
            progress.completion_rate,
        )
        return progress

    def list_trainee_courses(self, user_id: str) -> List[TraineeCourse]:
        """Build the dashboard cards for every course assigned to a user."""
        document = self.store.load()
        cards = []
        for assignment in document.assigned:
            if not ids_equal(assignment.get("userId"), user_id):
                continue
            course = _find_assigned_course(document, assignment)
            if course is None:
                continue
            cards.append(
                TraineeCourse(
                    id=str(course["id"]),
                    title=course.get("title", ""),
                    description=course.get("description") or "",
                    image=course.get("image") or DEFAULT_COURSE_IMAGE,
                    instructor=_instructor_name(document, course.get("uploadedBy")),
                    completion_rate=self._dashboard_rate(
                        document, user_id, str(course["id"]), assignment
                    ),
                )
            )
        return cards

    def _dashboard_rate(
        self, document: Document, user_id: str, course_id: str, assignment: dict
    ) -> int:
        index = self._find_index(document, user_id, course_id)
        if index is not None:
            return int(document.progress[index].get("completionRate") or 0)
        match = re.match(r"\s*(\d+)", str(assignment.get("progress") or ""))
        return int(match.group(1)) if match else 0


def _find_assigned_course(document: Document, assignment: dict) -> Optional[dict]:
    for course in document.courses:
        if assignment.get("courseId") and ids_equal(course.get("id"), assignment["courseId"]):
            return course
    for course in document.courses:
        if assignment.get("courseTitle") and course.get("title") == assignment["courseTitle"]:
            return course
    return None


def _instructor_name(document: Document, uploader_id: Optional[str]) -> str:
    for user in document.users:
        if uploader_id and user.get("userId") == uploader_id:
            return user.get("fullName") or "Unknown Instructor"
    return "Unknown Instructor"
