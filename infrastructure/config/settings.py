"""
Environment-specific deployment settings.

Cost-optimized defaults for development/testing.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Stack settings with cost-optimized defaults."""

    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Lambda Configuration
    lambda_memory_mb: int = 256
    lambda_timeout_seconds: int = 30
    log_level: str = "INFO"

    # Defect workflow
    max_image_bytes: int = 3_145_728  # 3 MiB
    atomic_ticket_index: bool = False
    image_base_url: str = ""  # overrides the images distribution domain

    # Project-name cache
    project_cache_ttl_seconds: int = 300

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        atomic_index = os.environ.get("ATOMIC_TICKET_INDEX", "false").lower() == "true"
        region = os.environ.get("AWS_REGION", cls.aws_region)
        image_base_url = os.environ.get("IMAGE_BASE_URL", "")

        # Production overrides
        if env == "prod":
            return cls(
                environment="prod",
                aws_region=region,
                lambda_memory_mb=512,
                atomic_ticket_index=atomic_index,
                image_base_url=image_base_url,
                log_level="WARNING",
            )

        return cls(
            environment=env,
            aws_region=region,
            atomic_ticket_index=atomic_index,
            image_base_url=image_base_url,
        )

    def lambda_environment(
        self,
        *,
        tickets_table: str,
        users_table: str,
        projects_table: str,
        images_bucket: str,
        images_cdn_domain: str,
    ) -> dict:
        """
        Environment variables for the API Lambda.

        IMAGE_BASE_URL is always set: an explicit ``image_base_url`` wins,
        otherwise the images distribution's domain is used. The bucket itself
        blocks public reads, so its direct URL is never handed out.
        """
        return {
            "TICKETS_TABLE": tickets_table,
            "USERS_TABLE": users_table,
            "PROJECTS_TABLE": projects_table,
            "IMAGES_BUCKET": images_bucket,
            "IMAGE_BASE_URL": self.image_base_url or f"https://{images_cdn_domain}",
            "MAX_IMAGE_BYTES": str(self.max_image_bytes),
            "ATOMIC_TICKET_INDEX": str(self.atomic_ticket_index).lower(),
            "PROJECT_CACHE_TTL_SECONDS": str(self.project_cache_ttl_seconds),
            "LOG_LEVEL": self.log_level,
        }
