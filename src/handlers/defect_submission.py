"""
Defect submission handler for POST /projects/{projectId}/defects.

Resolves the caller and the project, then hands an immutable form snapshot
to the submission workflow and maps its outcome to an HTTP status.
"""

from __future__ import annotations

import asyncio
import json
import uuid
from typing import Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from models.submission import SubmissionStatus, SubmitDefectRequest
from models.ticket import ProjectRef
from utils.error_handling import AppError, to_response
from utils.logging_config import get_logger

logger = get_logger(__name__)

STATUS_CODES: Dict[SubmissionStatus, int] = {
    SubmissionStatus.SUCCESS: 201,
    SubmissionStatus.VALIDATION_ERROR: 422,
    SubmissionStatus.UPLOAD_ERROR: 502,
    SubmissionStatus.WRITE_ERROR: 502,
}

# Lazy-loaded services to avoid import-time AWS clients
_submission_service: Optional["TicketSubmissionService"] = None
_project_service: Optional["ProjectService"] = None
_identity_service: Optional["IdentityService"] = None


def _get_submission_service():
    """Lazy-load TicketSubmissionService."""
    global _submission_service
    if _submission_service is None:
        from services.ticket_service import TicketSubmissionService
        _submission_service = TicketSubmissionService()
    return _submission_service


def _get_project_service():
    """Lazy-load ProjectService."""
    global _project_service
    if _project_service is None:
        from services.project_service import ProjectService
        _project_service = ProjectService()
    return _project_service


def _get_identity_service():
    """Lazy-load IdentityService."""
    global _identity_service
    if _identity_service is None:
        from services.identity_service import IdentityService
        _identity_service = IdentityService()
    return _identity_service


def _json(status: int, body: Dict) -> Dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def lambda_handler(event, context):
    """Handle POST /projects/{projectId}/defects."""
    correlation_id = str(uuid.uuid4())

    project_id = (event.get("pathParameters") or {}).get("projectId")
    if not project_id:
        # Fall back to the raw path when invoked through the prefix router.
        path = event.get("requestContext", {}).get("http", {}).get("path", "")
        parts = [p for p in path.split("/") if p]
        if len(parts) >= 3 and parts[0] == "projects":
            project_id = parts[1]
    if not project_id:
        return _json(400, {"message": "projectId is required", "correlation_id": correlation_id})

    try:
        payload = json.loads(event.get("body") or "{}")
        form = SubmitDefectRequest.model_validate(payload).to_form()
    except (json.JSONDecodeError, PydanticValidationError) as exc:
        logger.warning(
            "Rejected defect payload",
            extra={"correlation_id": correlation_id, "error": str(exc)},
        )
        return _json(
            400,
            {"message": "Invalid request", "error": str(exc), "correlation_id": correlation_id},
        )

    try:
        current_user = _get_identity_service().get_current_user(event)
    except AppError as exc:
        return to_response(exc)

    # A failed lookup leaves the name blank; it never blocks the submission.
    project_name = _get_project_service().get_project_name(project_id) or ""
    project = ProjectRef(project_id=project_id, project_name=project_name)

    outcome = asyncio.run(_get_submission_service().submit(form, current_user, project))

    logger.info(
        "Defect submission finished",
        extra={
            "correlation_id": correlation_id,
            "ticket_id": outcome.ticket_id,
            "status": outcome.status.value,
            "index_updated": outcome.index_updated,
        },
    )

    body = json.loads(outcome.model_dump_json(by_alias=True))
    body["correlation_id"] = correlation_id
    return _json(STATUS_CODES[outcome.status], body)
