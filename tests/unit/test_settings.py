"""
Configuration tests for the runtime AppConfig and the CDK Settings.

Neither touches AWS; the CDK settings module has no aws_cdk import.
"""

import sys
from pathlib import Path
from unittest.mock import patch

SRC_PATH = Path(__file__).parent.parent.parent / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))


class TestAppConfig:
    """Test utils.config.AppConfig."""

    def test_defaults(self):
        from utils.config import AppConfig

        config = AppConfig()
        assert config.max_image_bytes == 3_145_728
        assert config.atomic_ticket_index is False
        assert config.image_base_url is None

    def test_from_environment(self):
        from utils.config import AppConfig

        env = {
            "ENVIRONMENT": "staging",
            "TICKETS_TABLE": "t-table",
            "USERS_TABLE": "u-table",
            "PROJECTS_TABLE": "p-table",
            "IMAGES_BUCKET": "img-bucket",
            "IMAGE_BASE_URL": "https://cdn.example.com",
            "MAX_IMAGE_BYTES": "1024",
            "ATOMIC_TICKET_INDEX": "TRUE",
        }
        with patch.dict("os.environ", env):
            config = AppConfig.from_environment()

        assert config.environment == "staging"
        assert config.tickets_table == "t-table"
        assert config.users_table == "u-table"
        assert config.projects_table == "p-table"
        assert config.images_bucket == "img-bucket"
        assert config.image_base_url == "https://cdn.example.com"
        assert config.max_image_bytes == 1024
        assert config.atomic_ticket_index is True

    def test_blank_base_url_means_bucket_url(self):
        from utils.config import AppConfig

        with patch.dict("os.environ", {"IMAGE_BASE_URL": ""}):
            assert AppConfig.from_environment().image_base_url is None


class TestStackSettings:
    """Test infrastructure.config.settings.Settings."""

    def test_dev_defaults(self):
        from infrastructure.config.settings import Settings

        with patch.dict("os.environ", {"ENVIRONMENT": "dev"}):
            settings = Settings.from_environment()

        assert settings.environment == "dev"
        assert settings.lambda_memory_mb == 256
        assert settings.max_image_bytes == 3_145_728

    def test_prod_overrides(self):
        from infrastructure.config.settings import Settings

        env = {"ENVIRONMENT": "prod", "ATOMIC_TICKET_INDEX": "true"}
        with patch.dict("os.environ", env):
            settings = Settings.from_environment()

        assert settings.environment == "prod"
        assert settings.lambda_memory_mb == 512
        assert settings.log_level == "WARNING"
        assert settings.atomic_ticket_index is True

    def _lambda_environment(self, settings):
        return settings.lambda_environment(
            tickets_table="t-table",
            users_table="u-table",
            projects_table="p-table",
            images_bucket="img-bucket",
            images_cdn_domain="d111.cloudfront.net",
        )

    def test_lambda_environment_points_images_at_cdn(self):
        from infrastructure.config.settings import Settings

        env = self._lambda_environment(Settings())

        assert env["IMAGE_BASE_URL"] == "https://d111.cloudfront.net"
        assert env["IMAGES_BUCKET"] == "img-bucket"
        assert env["ATOMIC_TICKET_INDEX"] == "false"
        assert env["MAX_IMAGE_BYTES"] == "3145728"

    def test_lambda_environment_prefers_explicit_base_url(self):
        from infrastructure.config.settings import Settings

        env = self._lambda_environment(Settings(image_base_url="https://img.example.com"))

        assert env["IMAGE_BASE_URL"] == "https://img.example.com"

    def test_runtime_config_never_falls_back_to_bucket_url(self):
        from infrastructure.config.settings import Settings
        from utils.config import AppConfig

        with patch.dict("os.environ", self._lambda_environment(Settings())):
            config = AppConfig.from_environment()

        assert config.image_base_url == "https://d111.cloudfront.net"
