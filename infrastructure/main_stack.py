"""
Main CDK stack for the HubSpot CRM seeder.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct

from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class CrmSeederStack(Stack):
    """Secret for the HubSpot token plus the API layer."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        Tags.of(self).add("Project", "crm-seeder")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("ManagedBy", "cdk")

        # Value is set out of band: {"apiKey": "<private app token>"}
        hubspot_secret = secretsmanager.Secret(
            self,
            "HubSpotToken",
            secret_name=f"crm-seeder/{settings.environment}/hubspot",
            description="HubSpot private app token used by the seeder Lambda",
        )

        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            hubspot_secret=hubspot_secret,
            extra_env={
                "HUBSPOT_API_BASE_URL": settings.hubspot_api_base_url,
                "CONTACT_LINK_DELAY_SECONDS": str(settings.contact_link_delay_seconds),
                "TICKET_LINK_DELAY_SECONDS": str(settings.ticket_link_delay_seconds),
            },
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
            log_retention_days=settings.log_retention_days,
        )

        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "FunctionUrl", value=api_construct.function_url.url)
        CfnOutput(self, "HubSpotSecretArn", value=hubspot_secret.secret_arn)
