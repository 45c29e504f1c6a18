"""Exception types raised by essay writer operations."""

from typing import Optional


class EssayWriterError(Exception):
    """Base class for all essay writer errors."""


class InvalidRequestError(EssayWriterError):
    """Raised when required input is missing or malformed."""


class AuthenticationError(EssayWriterError):
    """Raised when the caller has no valid identity token."""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)


class UpstreamError(EssayWriterError):
    """Raised when the completion endpoint call fails for an operation."""

    def __init__(self, operation: str, message: Optional[str] = None):
        self.operation = operation
        self.detail = message
        text = f"Failed to {operation}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class ResponseParseError(EssayWriterError):
    """Raised when model output does not match the expected structured format."""


class EssayNotFoundError(EssayWriterError):
    """Raised when an essay does not exist or belongs to another user."""

    def __init__(self, essay_id: str):
        self.essay_id = essay_id
        super().__init__(f"Essay not found: {essay_id}")


class ConfigError(EssayWriterError):
    """Raised when configuration is missing or invalid."""


class CorruptEssayError(EssayWriterError):
    """Raised when a stored essay file cannot be decoded."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Unreadable essay file {path}: {message}")
