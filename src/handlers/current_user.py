"""Handler for GET /me."""

import uuid
from typing import Optional

from models.response import ApiResponse
from utils.error_handling import AppError, to_response

_identity_service: Optional["IdentityService"] = None


def _get_identity_service():
    """Lazy-load IdentityService."""
    global _identity_service
    if _identity_service is None:
        from services.identity_service import IdentityService
        _identity_service = IdentityService()
    return _identity_service


def lambda_handler(event, context):
    """Return the signed-in user's profile, including myTickets."""
    try:
        user = _get_identity_service().get_current_user(event)
    except AppError as exc:
        return to_response(exc)

    response = ApiResponse(
        message="ok",
        data=user.to_document(),
        correlation_id=str(uuid.uuid4()),
    )
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": response.model_dump_json(),
    }
