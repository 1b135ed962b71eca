"""Course routes."""

from typing import Any, Dict, List

from fastapi import APIRouter, Request

from api.payload import read_payload
from core.dependencies import CourseManagerDep
from schemas.course import CreateCourseRequest
from utils.content_router import UploadedFile

router = APIRouter(prefix="/api/courses", tags=["Courses"])


@router.get("", summary="List courses")
def list_courses(course_manager: CourseManagerDep) -> List[Dict[str, Any]]:
    """Every course with the titles of its lessons and assessments."""
    return course_manager.list_courses()


@router.post("", summary="Create a course")
async def create_course(request: Request, course_manager: CourseManagerDep) -> dict:
    """Create a course from a form post (with optional ``courseImage``) or JSON.

    Returns:
        Dictionary with success message and the created course.
    """
    fields, files = await read_payload(request)
    req = CreateCourseRequest.model_validate(fields)
    images = files.get("courseImage") or []
    image = UploadedFile(images[0].filename, images[0].file) if images else None

    course = course_manager.create_course(req, image)
    return {
        "success": True,
        "message": "Course created successfully",
        "course": course.to_record(),
    }


@router.get("/{course_id}", summary="Get course details")
def get_course(course_id: str, course_manager: CourseManagerDep) -> Dict[str, Any]:
    return course_manager.get_course_detail(course_id)


@router.delete("/{course_id}", summary="Delete a course")
def delete_course(course_id: str, course_manager: CourseManagerDep) -> dict:
    """Delete a course with its lessons, assessments and image."""
    removed = course_manager.delete_course(course_id)
    return {
        "success": True,
        "message": "Course, lessons, assessments, and image deleted",
        "removed": removed,
    }
