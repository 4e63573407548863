"""Custom exceptions and helpers for consistent error responses."""

import json
from typing import Any, Dict


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(AppError):
    """Raised when a requested resource is missing."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, status_code=404)


class ValidationError(AppError):
    """Raised when input validation fails."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=422)


class UnauthorizedError(AppError):
    """Raised when the request carries no usable identity."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message, status_code=401)


class DocumentStoreError(AppError):
    """Raised when a DynamoDB read or write fails."""

    def __init__(self, message: str = "Document store request failed"):
        super().__init__(message, status_code=502)


class ObjectStoreError(AppError):
    """Raised when an S3 upload or lookup fails."""

    def __init__(self, message: str = "Object store request failed"):
        super().__init__(message, status_code=502)


def to_response(error: AppError) -> Dict[str, Any]:
    """Convert an AppError into a Lambda proxy integration response."""
    return {
        "statusCode": error.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps({"message": str(error), "status": "error"}),
    }
