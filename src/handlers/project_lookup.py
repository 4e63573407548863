"""Handler for GET /projects/{projectId}."""

import json
import uuid
from typing import Optional

from models.response import ApiResponse
from utils.logging_config import get_logger

logger = get_logger(__name__)

_project_service: Optional["ProjectService"] = None


def _get_project_service():
    """Lazy-load ProjectService."""
    global _project_service
    if _project_service is None:
        from services.project_service import ProjectService
        _project_service = ProjectService()
    return _project_service


def _project_id_from_event(event) -> Optional[str]:
    project_id = (event.get("pathParameters") or {}).get("projectId")
    if project_id:
        return project_id
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    parts = [p for p in path.split("/") if p]
    if len(parts) == 2 and parts[0] == "projects":
        return parts[1]
    return None


def lambda_handler(event, context):
    """Return the project's display name for the defect form header."""
    correlation_id = str(uuid.uuid4())
    project_id = _project_id_from_event(event)
    if not project_id:
        return {
            "statusCode": 400,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"message": "projectId is required"}),
        }

    name = _get_project_service().get_project_name(project_id)
    if name is None:
        return {
            "statusCode": 404,
            "headers": {"Content-Type": "application/json"},
            "body": json.dumps({"message": "Project not found"}),
        }

    logger.info("Project served", extra={"project_id": project_id})
    response = ApiResponse(
        message="ok",
        data={"projectId": project_id, "projectName": name},
        correlation_id=correlation_id,
    )
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": response.model_dump_json(),
    }
