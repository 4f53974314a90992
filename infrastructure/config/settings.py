"""
Environment-specific deployment settings.

Dev keeps the demo delays short enough to iterate; prod gives the Lambda room
for full 100-record batches.
"""

from dataclasses import dataclass
import os


@dataclass
class Settings:
    """Deployment settings for the seeder stack."""

    environment: str = "dev"
    aws_region: str = "eu-west-2"

    # Lambda Configuration
    lambda_memory_mb: int = 256
    # Sequential HubSpot calls plus the post-create link delay
    lambda_timeout_seconds: int = 300

    # Seconds to wait before linking freshly created records
    contact_link_delay_seconds: int = 10
    ticket_link_delay_seconds: int = 5

    hubspot_api_base_url: str = "https://api.hubapi.com"
    log_retention_days: int = 7

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        region = os.environ.get("AWS_REGION", cls.aws_region)

        # Production overrides
        if env == "prod":
            return cls(
                environment="prod",
                aws_region=region,
                lambda_memory_mb=512,
                lambda_timeout_seconds=900,
                log_retention_days=30,
            )

        return cls(environment=env, aws_region=region)
