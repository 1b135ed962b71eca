"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes.
Store, storage, LLM and code runner are process-wide singletons; managers
are built per request on top of them.
"""

from typing import Annotated, Optional

from fastapi import Depends

from core.document_store import DocumentStore
from utils import assessment_manager
from utils import assignment_manager
from utils import collection_manager
from utils import course_manager
from utils import progress_manager
from utils import user_manager
from utils.code_runner import CodeRunner
from utils.lesson_page import LessonPageRenderer
from utils.llm_manager import LLMManager, get_llm_manager
from utils.storage import UploadStorage

_document_store_instance: Optional[DocumentStore] = None
_upload_storage_instance: Optional[UploadStorage] = None
_code_runner_instance: Optional[CodeRunner] = None
_lesson_page_renderer_instance: Optional[LessonPageRenderer] = None


def get_document_store() -> DocumentStore:
    """Get DocumentStore singleton instance.

    Returns:
        DocumentStore instance (singleton).
    """
    global _document_store_instance
    if _document_store_instance is None:
        _document_store_instance = DocumentStore()
    return _document_store_instance


def get_upload_storage() -> UploadStorage:
    """Get UploadStorage singleton instance with its directories created."""
    global _upload_storage_instance
    if _upload_storage_instance is None:
        _upload_storage_instance = UploadStorage()
        _upload_storage_instance.ensure_dirs()
    return _upload_storage_instance


def get_code_runner() -> CodeRunner:
    global _code_runner_instance
    if _code_runner_instance is None:
        _code_runner_instance = CodeRunner()
    return _code_runner_instance


def get_lesson_page_renderer() -> LessonPageRenderer:
    global _lesson_page_renderer_instance
    if _lesson_page_renderer_instance is None:
        _lesson_page_renderer_instance = LessonPageRenderer()
    return _lesson_page_renderer_instance


DocumentStoreDep = Annotated[DocumentStore, Depends(get_document_store)]
UploadStorageDep = Annotated[UploadStorage, Depends(get_upload_storage)]


def get_collection_manager(store: DocumentStoreDep) -> collection_manager.CollectionManager:
    """Get CollectionManager instance bound to the document store."""
    return collection_manager.CollectionManager(store)


def get_course_manager(
    store: DocumentStoreDep, storage: UploadStorageDep
) -> course_manager.CourseManager:
    """Get CourseManager instance bound to the store and upload storage."""
    return course_manager.CourseManager(store, storage)


def get_assessment_manager(
    store: DocumentStoreDep, storage: UploadStorageDep
) -> assessment_manager.AssessmentManager:
    return assessment_manager.AssessmentManager(store, storage)


def get_progress_manager(store: DocumentStoreDep) -> progress_manager.ProgressManager:
    return progress_manager.ProgressManager(store)


def get_user_manager(store: DocumentStoreDep) -> user_manager.UserManager:
    """Get UserManager instance bound to the document store."""
    return user_manager.UserManager(store)


def get_assignment_manager(store: DocumentStoreDep) -> assignment_manager.AssignmentManager:
    return assignment_manager.AssignmentManager(store)


# Type aliases for dependency injection
CollectionManagerDep = Annotated[
    collection_manager.CollectionManager, Depends(get_collection_manager)
]
CourseManagerDep = Annotated[
    course_manager.CourseManager, Depends(get_course_manager)
]
AssessmentManagerDep = Annotated[
    assessment_manager.AssessmentManager, Depends(get_assessment_manager)
]
ProgressManagerDep = Annotated[
    progress_manager.ProgressManager, Depends(get_progress_manager)
]
UserManagerDep = Annotated[
    user_manager.UserManager, Depends(get_user_manager)
]
AssignmentManagerDep = Annotated[
    assignment_manager.AssignmentManager, Depends(get_assignment_manager)
]
LLMManagerDep = Annotated[LLMManager, Depends(get_llm_manager)]
CodeRunnerDep = Annotated[CodeRunner, Depends(get_code_runner)]
LessonPageRendererDep = Annotated[LessonPageRenderer, Depends(get_lesson_page_renderer)]
