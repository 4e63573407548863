"""
Current-user lookup.

API Gateway's JWT authorizer has already verified the token; this module only
reads the subject claim and loads the matching profile from the users table.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from models.user import CurrentUser
from repositories.dynamodb_repo import DynamoDbRepository
from utils.config import AppConfig
from utils.error_handling import NotFoundError, UnauthorizedError, ValidationError
from utils.logging_config import get_logger
from utils.validators import ensure_present

logger = get_logger(__name__)


def claims_from_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Extract JWT claims placed on the event by the HTTP API authorizer."""
    return (
        event.get("requestContext", {})
        .get("authorizer", {})
        .get("jwt", {})
        .get("claims", {})
    ) or {}


class IdentityService:
    """Resolve the signed-in user for a request."""

    def __init__(
        self,
        users_repo: Optional[DynamoDbRepository] = None,
        config: Optional[AppConfig] = None,
    ):
        config = config or AppConfig.from_environment()
        self.users_repo = users_repo or DynamoDbRepository(config.users_table)

    def get_current_user(self, event: Dict[str, Any]) -> CurrentUser:
        """Return the caller's profile snapshot; raises AppError subclasses."""
        user_id = claims_from_event(event).get("sub")
        try:
            ensure_present(user_id, "sub claim")
        except ValidationError as exc:
            raise UnauthorizedError(str(exc)) from exc

        profile = self.users_repo.get(user_id)
        if not profile:
            logger.warning("User profile missing", extra={"user_id": user_id})
            raise NotFoundError("User profile not found")

        return CurrentUser.model_validate({**profile, "id": user_id})
