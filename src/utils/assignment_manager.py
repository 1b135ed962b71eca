"""Trainee course assignments."""

import logging
from typing import List, Optional

from core.document_store import DocumentStore
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.identifiers import ids_equal
from schemas.document import Record
from schemas.progress import AssignCourseRequest, Assignment, ReassignCourseRequest
from utils.course_manager import find_record

logger = logging.getLogger(__name__)


class AssignmentManager:
    """Links trainees to courses; one link per (userId, courseTitle)."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def list_assignments(self) -> List[Record]:
        return self.store.load().assigned

    def assign(self, req: AssignCourseRequest) -> Assignment:
        """Assign a course to a trainee.

        The course may be given by title, by id, or both; an id is resolved
        to the course's current title.

        Raises:
            ValidationError: If userId or the course is missing.
            NotFoundError: If courseId names no course.
            ConflictError: If the trainee already has this course.
        """
        if not req.user_id or not (req.course_title or req.course_id):
            raise ValidationError("Missing required fields.")

        with self.store.transaction() as document:
            course_title: Optional[str] = req.course_title
            if req.course_id:
                course = find_record(document.courses, req.course_id)
                if course is None:
                    raise NotFoundError("Course not found")
                course_title = course.get("title") or course_title

            duplicate = any(
                ids_equal(a.get("userId"), req.user_id) and a.get("courseTitle") == course_title
                for a in document.assigned
            )
            if duplicate:
                name = req.full_name or req.user_id
                raise ConflictError(f"{name} is already assigned to {course_title}.")

            assignment = Assignment(
                user_id=req.user_id,
                full_name=req.full_name,
                email=req.email,
                course_id=req.course_id,
                course_title=course_title,
                status=req.status or "Not Started",
                progress=req.progress or "0%",
            )
            document.assigned.append(assignment.to_record())

        logger.info("Assigned %s to user %s", course_title, req.user_id)
        return assignment

    def reassign(self, user_id: str, req: ReassignCourseRequest) -> Assignment:
        """Point the user's first assignment at another course.

        Raises:
            NotFoundError: If the user has no assignment or the course is unknown.
        """
        with self.store.transaction() as document:
            index = next(
                (i for i, a in enumerate(document.assigned) if ids_equal(a.get("userId"), user_id)),
                None,
            )
            if index is None:
                raise NotFoundError("Trainee not found")
            course = find_record(document.courses, req.course_id)
            if course is None:
                raise NotFoundError("Course not found")

            assignment = Assignment.model_validate(document.assigned[index])
            assignment.course_id = str(course["id"])
            assignment.course_title = course.get("title", "")
            if req.status is not None:
                assignment.status = req.status
            if req.progress is not None:
                assignment.progress = req.progress
            document.assigned[index] = assignment.to_record()

        logger.info("Reassigned user %s to course %s", user_id, assignment.course_id)
        return assignment
