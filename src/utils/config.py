"""
Runtime configuration for the API Lambda.

Values come from environment variables set by the CDK stack; defaults keep
local runs and tests working without any setup.
"""

from dataclasses import dataclass
import os
from typing import Optional

# 3 MiB, the largest defect screenshot the form accepts.
DEFAULT_MAX_IMAGE_BYTES = 3_145_728


@dataclass(frozen=True)
class AppConfig:
    """Table, bucket and workflow settings."""

    environment: str = "dev"

    # DynamoDB collections
    tickets_table: str = "tickets"
    users_table: str = "users"
    projects_table: str = "projects"

    # S3 image storage
    images_bucket: str = "bugtrail-defect-images"
    image_base_url: Optional[str] = None  # e.g. a CloudFront domain
    max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES

    # Use a store-side list_append for myTickets instead of the blind merge
    atomic_ticket_index: bool = False

    project_cache_ttl_seconds: int = 300
    project_cache_max_size: int = 100

    @classmethod
    def from_environment(cls) -> "AppConfig":
        """Load settings from environment variables."""
        return cls(
            environment=os.environ.get("ENVIRONMENT", "dev"),
            tickets_table=os.environ.get("TICKETS_TABLE", cls.tickets_table),
            users_table=os.environ.get("USERS_TABLE", cls.users_table),
            projects_table=os.environ.get("PROJECTS_TABLE", cls.projects_table),
            images_bucket=os.environ.get("IMAGES_BUCKET", cls.images_bucket),
            image_base_url=os.environ.get("IMAGE_BASE_URL") or None,
            max_image_bytes=int(
                os.environ.get("MAX_IMAGE_BYTES", DEFAULT_MAX_IMAGE_BYTES)
            ),
            atomic_ticket_index=os.environ.get("ATOMIC_TICKET_INDEX", "false").lower()
            == "true",
            project_cache_ttl_seconds=int(
                os.environ.get("PROJECT_CACHE_TTL_SECONDS", cls.project_cache_ttl_seconds)
            ),
        )
