"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

One function keeps the lazily created boto3 clients and the project-name
cache warm across routes.
"""

from typing import Callable, Dict, Tuple
import json

from . import current_user, defect_submission, health_check, project_lookup


def _response(status: int, body: Dict) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def lambda_handler(event, context):
    """
    Entry point invoked by API Gateway HTTP API.

    The event carries the HTTP method and path; route keys are matched by
    prefix so path parameters pass through to the handler.
    """
    method = event.get("requestContext", {}).get("http", {}).get("method", "")
    path = event.get("requestContext", {}).get("http", {}).get("path", "")
    route_key = f"{method.upper()} {path}"

    route_table: Tuple[Tuple[str, Callable], ...] = (
        ("GET /health", health_check.lambda_handler),
        ("GET /me", current_user.lambda_handler),
        ("POST /projects/", defect_submission.lambda_handler),
        ("GET /projects/", project_lookup.lambda_handler),
    )

    for prefix, handler in route_table:
        if route_key.startswith(prefix):
            return handler(event, context)

    return _response(404, {"message": "Route not found", "route": route_key})
