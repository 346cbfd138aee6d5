"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from clerk_node.clerk.client import ClerkClient
from clerk_node.config import Settings
from clerk_node.operations import router as operations_handler
from clerk_node.operations.executor import OperationExecutor
from clerk_node.operations.registry import registered_operations
from clerk_node.operations.router import router as operations_router
from clerk_node.webhook import handler as webhook_handler
from clerk_node.webhook.dispatcher import HttpWorkflowDispatcher, LoggingDispatcher
from clerk_node.webhook.handler import router as webhook_router
from clerk_node.webhook.models import CLERK_EVENT_TYPES

logger = logging.getLogger(__name__)


def log_startup_notice(settings: Settings) -> None:
    """Logged once per process from the lifespan hook."""
    operation_count = sum(len(ops) for ops in registered_operations().values())
    logger.info(
        "Clerk node loaded: %d operations, webhook verification %s",
        operation_count,
        "DISABLED" if settings.webhook_skip_verification else "enabled",
    )
    if settings.webhook_skip_verification:
        logger.warning("Webhook signature verification is off; do not run this in production")
    elif not settings.clerk_webhook_secret:
        logger.warning("CLERK_WEBHOOK_SECRET is not set; every delivery will be rejected")

    unknown = sorted(set(settings.webhook_events) - CLERK_EVENT_TYPES)
    if unknown:
        logger.warning("Unrecognised Clerk event types selected: %s", ", ".join(unknown))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    clerk_client = ClerkClient(settings.clerk_secret_key, settings.clerk_api_version)
    if settings.workflow_dispatch_url:
        dispatcher = HttpWorkflowDispatcher(settings.workflow_dispatch_url)
    else:
        dispatcher = LoggingDispatcher()

    # Inject dependencies into route handlers
    operations_handler.configure(OperationExecutor(clerk_client))
    webhook_handler.configure(settings.verification_config(), dispatcher)

    log_startup_notice(settings)
    yield

    # Cleanup
    await clerk_client.close()
    await dispatcher.close()
    logger.info("Clerk node stopped")


app = FastAPI(title="Clerk Node", lifespan=lifespan)
app.include_router(webhook_router)
app.include_router(operations_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "clerk_node.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
