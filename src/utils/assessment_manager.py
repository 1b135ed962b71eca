"""Assessment and question building.

Every assessment is also mirrored to ``uploads/assessments/<title>.json``
after creation and after each appended question, so it can be downloaded
on its own. Assessments with the same sanitized title share that file.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, List, Optional, Tuple

from core.document_store import DocumentStore
from core.exceptions import NotFoundError, ValidationError
from schemas.assessment import (
    AppendQuestionRequest,
    Assessment,
    CreateAssessmentRequest,
    Question,
    QuestionType,
)
from utils.course_manager import find_record
from utils.storage import UploadStorage

logger = logging.getLogger(__name__)


def sanitize_title(title: Optional[str], fallback: str) -> str:
    """Turn a title into a file-name stem."""
    safe = re.sub(r"[^\w\s-]", "_", title or "")
    safe = re.sub(r"\s+", "_", safe).strip()
    return safe or fallback


def _parse_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_options(raw: Any) -> List[Any]:
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    try:
        options = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        raise ValidationError("Options must be a JSON-encoded list.") from e
    if not isinstance(options, list):
        raise ValidationError("Options must be a JSON-encoded list.")
    return options


class AssessmentManager:
    """Creates assessments and appends questions to them."""

    def __init__(self, store: DocumentStore, storage: UploadStorage):
        """Initialize AssessmentManager.

        Args:
            store: The document store.
            storage: Upload storage holding the snapshot files.
        """
        self.store = store
        self.storage = storage

    def snapshot_path(self, assessment: Assessment) -> Path:
        stem = sanitize_title(assessment.title, f"assessment-{assessment.id}")
        return self.storage.assessments_dir / f"{stem}.json"

    def _write_snapshot(self, assessment: Assessment) -> str:
        path = self.snapshot_path(assessment)
        self.storage.write_json(path, {"assessments": [assessment.to_record()]})
        logger.info("Saved assessment snapshot: %s", path)
        return self.storage.public_url(path)

    def create_assessment(self, req: CreateAssessmentRequest) -> Tuple[Assessment, str]:
        """Create an assessment and write its snapshot file.

        Returns:
            The assessment and the snapshot's public URL.

        Raises:
            ValidationError: If a required field is missing.
        """
        title = (req.title or "").strip()
        if not (title and req.type and req.difficulty and req.course_id and req.lesson_id):
            raise ValidationError("Missing required fields.")

        assessment = Assessment(
            title=title,
            type=req.type,
            difficulty=req.difficulty,
            course_id=req.course_id,
            lesson_id=req.lesson_id,
            duration=req.duration or None,
            deadline=req.deadline or None,
            questions=req.questions or [],
        )
        with self.store.transaction() as document:
            document.assessments.append(assessment.to_record())
        url = self._write_snapshot(assessment)
        logger.info("Created assessment %s (%s)", assessment.id, assessment.title)
        return assessment, url

    def get_assessment(self, assessment_id: str) -> Assessment:
        record = find_record(self.store.load().assessments, assessment_id)
        if record is None:
            raise NotFoundError("Assessment not found.")
        return Assessment.model_validate(record)

    def append_question(self, req: AppendQuestionRequest) -> Tuple[Question, Assessment]:
        """Append one question to an existing assessment.

        Raises:
            ValidationError: If the question type or text is invalid.
            NotFoundError: If the assessment does not exist.
        """
        try:
            question_type = QuestionType(req.question_type)
        except ValueError as e:
            raise ValidationError(
                "questionType must be one of: mcq, textbox, code."
            ) from e
        if not (req.question or "").strip():
            raise ValidationError("Question text is required.")
        is_mcq = question_type is QuestionType.MCQ
        options = _parse_options(req.options) if is_mcq else []

        with self.store.transaction() as document:
            record = find_record(document.assessments, req.assessment_id)
            if record is None:
                raise NotFoundError("Assessment not found.")
            assessment = Assessment.model_validate(record)
            question = Question(
                question_number=_parse_int(req.question_number)
                or len(assessment.questions) + 1,
                question_type=question_type,
                question=req.question.strip(),
                options=options,
                answer=req.answer if is_mcq else None,
                expected_answer=None if is_mcq else req.expected_answer,
                points=_parse_int(req.points) or 0,
            )
            assessment.questions.append(question)
            record.clear()
            record.update(assessment.to_record())

        self._write_snapshot(assessment)
        logger.info(
            "Added question #%d to assessment %s", question.question_number, assessment.id
        )
        return question, assessment
