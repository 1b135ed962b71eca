"""Main FastAPI application module.

This module initializes the FastAPI application, registers the error
handlers and all route handlers.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging_config import setup_logging
from config import (
    CORS_ALLOWED_ORIGINS,
    API_HOST,
    API_PORT,
)
from core.dependencies import get_document_store, get_upload_storage
from core.exceptions import LMSError
from api.routes import ai, assessments, assigned, auth, compiler, courses
from api.routes import collections, lessons, progress, users

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title="Learning Management API",
    description="Backend API for courses, lessons, assessments, progress and tutoring bots.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message, "detail": message},
    )


@app.exception_handler(LMSError)
async def lms_error_handler(request: Request, exc: LMSError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()) if part != "body")
        reason = errors[0].get("msg")
        message = f"Invalid request: {location}: {reason}" if location else f"Invalid request: {reason}"
    else:
        message = "Invalid request."
    return error_response(status.HTTP_400_BAD_REQUEST, message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


# Register route handlers
app.include_router(auth.router)
app.include_router(courses.router)
app.include_router(lessons.router)
app.include_router(assessments.router)
app.include_router(progress.router)
app.include_router(users.router)
app.include_router(assigned.router)
app.include_router(compiler.router)
app.include_router(ai.router)


@app.on_event("startup")
def startup_tasks() -> None:
    """Create the upload directories and migrate the stored document."""
    get_upload_storage()
    get_document_store().migrate()


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root, returning API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "Learning Management API",
        "version": "1.0.0",
        "description": "Backend API for courses, lessons, assessments, progress and tutoring bots.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok".
    """
    return {"status": "ok"}


# Generic collection routes match any /api/<name>, so they go last
app.include_router(collections.router)


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"🚀 Starting Learning Management API on {server_url}")
    print(f"📚 API docs: {server_url}/docs")
    print()

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
