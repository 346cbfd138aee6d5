from pydantic import Field
from pydantic_settings import BaseSettings

from clerk_node.webhook.models import VerificationConfig


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Clerk API
    clerk_secret_key: str
    clerk_api_version: str | None = None

    # Webhook trigger
    clerk_webhook_secret: str = ""
    webhook_tolerance_seconds: int = Field(default=300, ge=0)
    webhook_skip_verification: bool = False
    webhook_events: list[str] = []

    # Host workflow endpoint that receives admitted events
    workflow_dispatch_url: str | None = None

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "info"

    def verification_config(self) -> VerificationConfig:
        return VerificationConfig(
            secret=self.clerk_webhook_secret,
            tolerance_seconds=self.webhook_tolerance_seconds,
            skip_verification=self.webhook_skip_verification,
            selected_event_types=frozenset(self.webhook_events),
        )
