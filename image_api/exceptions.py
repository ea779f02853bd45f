"""Structured exception types for the Image API.

Each exception carries the HTTP status it maps to, so a single exception
handler in ``image_api.main`` can render all of them.

Usage:
    from image_api.exceptions import NotFoundError, StorageError

    # In service layer
    if image is None:
        raise NotFoundError("Image not found.")

    # In API layer - automatic handling via exception handlers
"""

from typing import Optional


class ImageAPIException(Exception):
    """Base exception for the Image API.

    Attributes:
        status_code: HTTP status code to return
        message: Human-readable error message
    """

    status_code: int = 400

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthError(ImageAPIException):
    """Raised when the shared-secret header does not match."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class NotFoundError(ImageAPIException):
    """Raised when an identifier does not resolve to an image record."""

    status_code = 404

    def __init__(self, message: str = "Image not found.") -> None:
        super().__init__(message)


class ValidationError(ImageAPIException):
    """Raised when a create request fails field validation.

    Attributes:
        errors: Mapping of field name to the list of messages for that field
    """

    status_code = 422

    def __init__(self, errors: dict[str, list[str]], message: Optional[str] = None) -> None:
        self.errors = errors
        super().__init__(message or summarize_errors(errors))


class StorageError(ImageAPIException):
    """Raised when the blob store or record store fails after validation."""

    status_code = 500


def summarize_errors(errors: dict[str, list[str]]) -> str:
    """Build the top-level message for a set of field errors.

    The first message is used verbatim; any further messages are counted,
    e.g. ``"The title field is required. (and 1 more error)"``.
    """
    messages = [message for field_messages in errors.values() for message in field_messages]
    if not messages:
        return "The given data was invalid."

    remaining = len(messages) - 1
    if remaining == 0:
        return messages[0]
    noun = "error" if remaining == 1 else "errors"
    return f"{messages[0]} (and {remaining} more {noun})"
