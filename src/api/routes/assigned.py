"""Course assignment routes."""

from typing import List

from fastapi import APIRouter, status

from core.dependencies import AssignmentManagerDep
from schemas.document import Record
from schemas.progress import AssignCourseRequest, ReassignCourseRequest

router = APIRouter(prefix="/api/assigned", tags=["Assignments"])


@router.get("", summary="List assignments")
def list_assignments(assignment_manager: AssignmentManagerDep) -> List[Record]:
    return assignment_manager.list_assignments()


@router.post("", status_code=status.HTTP_201_CREATED, summary="Assign a course")
def assign_course(req: AssignCourseRequest, assignment_manager: AssignmentManagerDep) -> dict:
    assignment = assignment_manager.assign(req)
    return {
        "success": True,
        "message": "Trainee assigned successfully!",
        "newAssign": assignment.to_record(),
    }


@router.put("/{user_id}", summary="Reassign a trainee's course")
def reassign_course(
    user_id: str, req: ReassignCourseRequest, assignment_manager: AssignmentManagerDep
) -> dict:
    assignment = assignment_manager.reassign(user_id, req)
    return {
        "success": True,
        "message": "Course reassigned successfully",
        "trainee": assignment.to_record(),
    }
