"""
API layer construct: shared Lambda + HTTP API routes behind a Cognito JWT authorizer.

A single Lambda keeps warm caches and reduces cold start costs.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from typing import Dict

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_authorizers as authorizers,
    aws_apigatewayv2_integrations as integrations,
    aws_cognito as cognito,
    aws_lambda as _lambda,
    aws_logs as logs,
)
from constructs import Construct


class ApiLayerConstruct(Construct):
    """Expose the defect endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        lambda_environment: Dict[str, str],
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 30,
    ) -> None:
        super().__init__(scope, construct_id)

        # Sign-in itself is handled by Cognito; the API only checks the token.
        self.user_pool = cognito.UserPool(
            self,
            "Users",
            user_pool_name=f"bugtrail-users-{environment}",
            sign_in_aliases=cognito.SignInAliases(email=True),
            self_sign_up_enabled=False,
        )
        self.user_pool_client = self.user_pool.add_client(
            "WebClient",
            auth_flows=cognito.AuthFlow(user_password=True, user_srp=True),
        )

        bundled_code = _lambda.Code.from_asset(
            "src",
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        self.main_lambda = _lambda.Function(
            self,
            "ApiHandler",
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            environment={"ENVIRONMENT": environment, **lambda_environment},
            log_retention=logs.RetentionDays.ONE_WEEK,
        )

        authorizer = authorizers.HttpUserPoolAuthorizer(
            "UserPoolAuthorizer",
            self.user_pool,
            user_pool_clients=[self.user_pool_client],
        )

        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"bugtrail-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
                allow_headers=["Authorization", "Content-Type"],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        # /health stays public; everything else needs a signed-in user.
        self.api.add_routes(
            path="/health",
            methods=[apigw.HttpMethod.GET],
            integration=integration,
        )

        route_defs = [
            (apigw.HttpMethod.GET, "/me"),
            (apigw.HttpMethod.GET, "/projects/{projectId}"),
            (apigw.HttpMethod.POST, "/projects/{projectId}/defects"),
        ]

        for method, path in route_defs:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
                authorizer=authorizer,
            )
