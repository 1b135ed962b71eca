"""Assessment and question routes."""

from fastapi import APIRouter, Request

from api.payload import read_payload
from core.dependencies import AssessmentManagerDep
from schemas.assessment import AppendQuestionRequest, CreateAssessmentRequest
from schemas.document import Record

router = APIRouter(prefix="/api", tags=["Assessments"])


@router.post("/assessments", summary="Create an assessment")
def create_assessment(
    req: CreateAssessmentRequest, assessment_manager: AssessmentManagerDep
) -> dict:
    """Create an assessment and write its downloadable snapshot.

    Returns:
        Dictionary with the assessment and the snapshot URL.
    """
    assessment, url = assessment_manager.create_assessment(req)
    return {
        "success": True,
        "message": "Assessment created successfully",
        "assessment": assessment.to_record(),
        "file": url,
    }


@router.get("/assessments/{assessment_id}", summary="Get an assessment")
def get_assessment(assessment_id: str, assessment_manager: AssessmentManagerDep) -> Record:
    return assessment_manager.get_assessment(assessment_id).to_record()


@router.post("/questions", summary="Append a question to an assessment")
async def append_question(request: Request, assessment_manager: AssessmentManagerDep) -> dict:
    """Append one question, sent as a form post or as JSON."""
    fields, _ = await read_payload(request)
    req = AppendQuestionRequest.model_validate(fields)
    question, assessment = assessment_manager.append_question(req)
    return {
        "success": True,
        "message": f"Question {question.question_number} added successfully",
        "question": question.to_record(),
        "assessment": assessment.to_record(),
    }
