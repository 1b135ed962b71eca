"""Progress routes and the trainee dashboard."""

from typing import List

from fastapi import APIRouter

from core.dependencies import ProgressManagerDep
from schemas.progress import ProgressUpdateRequest, TraineeCourse

router = APIRouter(prefix="/api", tags=["Progress"])


@router.get("/progress/{user_id}/{course_id}", summary="Get course progress")
def get_progress(user_id: str, course_id: str, progress_manager: ProgressManagerDep) -> dict:
    """Return the user's progress in a course, creating it when missing.

    The completion rate is recomputed from the course's current content.
    """
    progress = progress_manager.get_or_init(user_id, course_id)
    return {"success": True, "progress": progress.to_record()}


@router.post("/progress/update", summary="Record an opened lesson or assessment")
def update_progress(req: ProgressUpdateRequest, progress_manager: ProgressManagerDep) -> dict:
    progress = progress_manager.record_opened(
        req.user_id,
        req.course_id,
        lesson_id=req.lesson_id,
        assessment_id=req.assessment_id,
    )
    return {"success": True, "progress": progress.to_record()}


@router.get(
    "/trainee/{user_id}/courses",
    response_model=List[TraineeCourse],
    response_model_by_alias=True,
    summary="Courses assigned to a trainee",
)
def trainee_courses(user_id: str, progress_manager: ProgressManagerDep) -> List[TraineeCourse]:
    return progress_manager.list_trainee_courses(user_id)
