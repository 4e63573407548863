"""
Data layer construct: DynamoDB collections, the S3 bucket for defect images
and the CloudFront distribution that serves them.
"""

from aws_cdk import (
    RemovalPolicy,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_dynamodb as dynamodb,
    aws_s3 as s3,
)
from constructs import Construct


class DataLayerConstruct(Construct):
    """Provision the projects/tickets/users tables and the images bucket + CDN."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
    ) -> None:
        super().__init__(scope, construct_id)

        removal_policy = RemovalPolicy.RETAIN if environment == "prod" else RemovalPolicy.DESTROY

        def _table(logical_id: str) -> dynamodb.Table:
            # Every collection is a plain document table keyed on "id".
            return dynamodb.Table(
                self,
                logical_id,
                partition_key=dynamodb.Attribute(name="id", type=dynamodb.AttributeType.STRING),
                billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
                point_in_time_recovery=environment == "prod",
                removal_policy=removal_policy,
            )

        self.projects_table = _table("Projects")
        self.tickets_table = _table("Tickets")
        self.users_table = _table("Users")

        # Images are written once under images/<ticket id> and never modified.
        self.images_bucket = s3.Bucket(
            self,
            "DefectImages",
            encryption=s3.BucketEncryption.S3_MANAGED,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            enforce_ssl=True,
            removal_policy=removal_policy,
            auto_delete_objects=environment != "prod",
        )

        # The bucket stays private; reads go through CloudFront with origin access control.
        self.images_distribution = cloudfront.Distribution(
            self,
            "DefectImagesCdn",
            comment=f"bugtrail-{environment} defect images",
            default_behavior=cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_origin_access_control(self.images_bucket),
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
                allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD,
                cache_policy=cloudfront.CachePolicy.CACHING_OPTIMIZED,
            ),
            price_class=cloudfront.PriceClass.PRICE_CLASS_100,
        )
