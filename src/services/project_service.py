"""Project name lookup used to label new tickets."""

from __future__ import annotations

from typing import Optional

from repositories.dynamodb_repo import DynamoDbRepository
from utils.cache_service import LRUCache
from utils.config import AppConfig
from utils.error_handling import DocumentStoreError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ProjectService:
    """Read project names from the projects table, with caching."""

    def __init__(
        self,
        projects_repo: Optional[DynamoDbRepository] = None,
        config: Optional[AppConfig] = None,
    ):
        config = config or AppConfig.from_environment()
        self.projects_repo = projects_repo or DynamoDbRepository(config.projects_table)
        self.cache = LRUCache(
            max_size=config.project_cache_max_size,
            ttl_seconds=config.project_cache_ttl_seconds,
        )

    def get_project_name(self, project_id: str) -> Optional[str]:
        """Return the project's name, or None if it can't be read."""
        cache_key = f"project:{project_id}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            doc = self.projects_repo.get(project_id, fields=["name"])
        except DocumentStoreError as exc:
            logger.error(
                "Couldn't fetch project name",
                extra={"project_id": project_id, "error": str(exc)},
            )
            return None

        if not doc or "name" not in doc:
            logger.warning("Project not found", extra={"project_id": project_id})
            return None

        name = str(doc["name"])
        self.cache.set(cache_key, name)
        return name
