"""
API layer construct: the seeder Lambda, its HTTP API routes and a function URL.

API Gateway stops waiting after 30 seconds, so long seeding runs (which sleep
before linking) should go through the function URL instead.
"""

from typing import Dict

from aws_cdk import (
    BundlingOptions,
    Duration,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct

ROUTE_DEFS = (
    (apigw.HttpMethod.GET, "/api/hubspot/config"),
    (apigw.HttpMethod.POST, "/api/hubspot/contacts"),
    (apigw.HttpMethod.POST, "/api/hubspot/companies"),
    (apigw.HttpMethod.GET, "/api/hubspot/companies/fetch"),
    (apigw.HttpMethod.POST, "/api/hubspot/tickets"),
    (apigw.HttpMethod.POST, "/api/hubspot/associations"),
    (apigw.HttpMethod.POST, "/api/hubspot/contact-company-associations"),
    (apigw.HttpMethod.POST, "/api/hubspot/contact-ticket-associations"),
    (apigw.HttpMethod.POST, "/api/generate/{kind}"),
)

RETENTION = {
    7: logs.RetentionDays.ONE_WEEK,
    30: logs.RetentionDays.ONE_MONTH,
}


class ApiLayerConstruct(Construct):
    """Expose the seeding endpoints via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        hubspot_secret: secretsmanager.ISecret,
        extra_env: Dict[str, str],
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 300,
        log_retention_days: int = 7,
    ) -> None:
        super().__init__(scope, construct_id)

        # Installs faker, httpx, pydantic and python-json-logger next to the package
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
            handler="crm_seeder.handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            environment={
                "ENVIRONMENT": environment,
                "HUBSPOT_SECRET_ARN": hubspot_secret.secret_arn,
                **extra_env,
            },
            log_retention=RETENTION.get(log_retention_days, logs.RetentionDays.ONE_WEEK),
        )
        hubspot_secret.grant_read(self.main_lambda)

        self.function_url = self.main_lambda.add_function_url(
            auth_type=_lambda.FunctionUrlAuthType.AWS_IAM,
        )

        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"crm-seeder-api-{environment}",
            cors_preflight=apigw.CorsPreflightOptions(
                allow_origins=["*"],
                allow_methods=[apigw.CorsHttpMethod.ANY],
            ),
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        for method, path in ROUTE_DEFS:
            self.api.add_routes(
                path=path,
                methods=[method],
                integration=integration,
            )
