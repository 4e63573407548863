"""
Main CDK Stack for the BugTrail defect tracker.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
)
from constructs import Construct

from infrastructure.constructs.data_layer import DataLayerConstruct
from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class DefectTrackerStack(Stack):
    """Main stack wiring all constructs together."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        Tags.of(self).add("Project", "bugtrail")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Tables + images bucket.
        data_construct = DataLayerConstruct(
            self,
            "DataLayer",
            environment=settings.environment,
        )

        # 2) API layer (single Lambda).
        lambda_environment = settings.lambda_environment(
            tickets_table=data_construct.tickets_table.table_name,
            users_table=data_construct.users_table.table_name,
            projects_table=data_construct.projects_table.table_name,
            images_bucket=data_construct.images_bucket.bucket_name,
            images_cdn_domain=data_construct.images_distribution.distribution_domain_name,
        )

        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            lambda_environment=lambda_environment,
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        # Permissions for the API Lambda.
        data_construct.projects_table.grant_read_data(api_construct.main_lambda)
        data_construct.tickets_table.grant_write_data(api_construct.main_lambda)
        data_construct.users_table.grant_read_write_data(api_construct.main_lambda)
        data_construct.images_bucket.grant_put(api_construct.main_lambda)
        data_construct.images_bucket.grant_read(api_construct.main_lambda)

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "UserPoolId", value=api_construct.user_pool.user_pool_id)
        CfnOutput(
            self,
            "UserPoolClientId",
            value=api_construct.user_pool_client.user_pool_client_id,
        )
        CfnOutput(self, "TicketsTable", value=data_construct.tickets_table.table_name)
        CfnOutput(self, "ImagesBucket", value=data_construct.images_bucket.bucket_name)
        CfnOutput(
            self,
            "ImagesCdnDomain",
            value=data_construct.images_distribution.distribution_domain_name,
        )
