"""Custom exception classes for the learning management backend.

Every exception carries the HTTP status it maps to, so the handlers in
``app.py`` can turn any of them into a JSON error response.
"""


class LMSError(Exception):
    """Base exception for all learning management backend errors."""

    status_code: int = 500

    def __init__(self, message: str = "Internal server error"):
        """Initialize the exception.

        Args:
            message: Message that is safe to show to API clients.
        """
        self.message = message
        super().__init__(message)


class ValidationError(LMSError):
    """Raised when required fields are missing or invalid."""

    status_code = 400


class NotFoundError(LMSError):
    """Raised when a referenced record does not exist."""

    status_code = 404


class ConflictError(LMSError):
    """Raised when a record would duplicate an existing one."""

    status_code = 409


class AuthenticationError(LMSError):
    """Raised when credentials or tokens are rejected."""

    status_code = 401


class UpstreamError(LMSError):
    """Raised when an external dependency (AI provider, compiler) fails.

    The message is generic; the underlying cause is logged server-side.
    """

    status_code = 500


class LLMError(UpstreamError):
    """Raised when there is an error communicating with the LLM."""

    pass


class StorageError(LMSError):
    """Raised when reading or writing persisted files fails."""

    status_code = 500
