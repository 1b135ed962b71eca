"""Lesson routes: uploads, lookup and the rendered lesson page."""

from typing import List, Optional

from fastapi import APIRouter, File, Form, Query, UploadFile
from fastapi.responses import HTMLResponse

from core.dependencies import CourseManagerDep, LessonPageRendererDep
from schemas.document import Record
from utils.content_router import UploadedFile

router = APIRouter(tags=["Lessons"])


@router.post("/api/lessons", summary="Create a lesson from uploaded files")
def create_lesson(
    course_manager: CourseManagerDep,
    lesson_files: Optional[List[UploadFile]] = File(None, alias="lessonFiles"),
    lesson_title: Optional[str] = Form(None, alias="lessonTitle"),
    lesson_course: Optional[str] = Form(None, alias="lessonCourse"),
    lesson_desc: Optional[str] = Form(None, alias="lessonDesc"),
    uploaded_by: Optional[str] = Form(None, alias="uploadedBy"),
) -> dict:
    """Store the files by kind and attach them to a new lesson.

    Returns:
        Dictionary with success message and the created lesson.
    """
    files = [UploadedFile(f.filename, f.file) for f in lesson_files or [] if f.filename]
    lesson = course_manager.create_lesson(
        lesson_course,
        files,
        title=lesson_title,
        description=lesson_desc,
        uploaded_by=uploaded_by,
    )
    return {
        "success": True,
        "message": "Lesson added successfully",
        "lesson": lesson.to_record(),
    }


@router.get("/api/lessons", summary="List lessons")
def list_lessons(
    course_manager: CourseManagerDep,
    course_id: Optional[str] = Query(None, alias="courseId"),
) -> List[Record]:
    return course_manager.list_lessons(course_id)


@router.get("/api/lessons/{lesson_id}", summary="Get a lesson")
def get_lesson(lesson_id: str, course_manager: CourseManagerDep) -> Record:
    return course_manager.get_lesson(lesson_id).to_record()


@router.post("/api/upload-content", summary="Upload a single content file")
def upload_content(
    course_manager: CourseManagerDep,
    content_file: Optional[UploadFile] = File(None, alias="contentFile"),
    content_type: Optional[str] = Form(None, alias="type"),
    course_id: Optional[str] = Form(None, alias="courseId"),
    lesson_id: Optional[str] = Form(None, alias="lessonId"),
    description: Optional[str] = Form(None),
) -> dict:
    upload = UploadedFile(content_file.filename, content_file.file) if content_file else None
    return course_manager.store_content(
        upload,
        type=content_type,
        courseId=course_id,
        lessonId=lesson_id,
        description=description,
    )


@router.get("/lesson/{lesson_id}", response_class=HTMLResponse, summary="Lesson page")
def lesson_page(
    lesson_id: str,
    course_manager: CourseManagerDep,
    renderer: LessonPageRendererDep,
) -> HTMLResponse:
    """Render the lesson page and refresh its cached copy."""
    lesson = course_manager.get_lesson(lesson_id)
    return HTMLResponse(renderer.publish(lesson))
