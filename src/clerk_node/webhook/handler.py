"""Webhook endpoint for receiving Clerk events."""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from clerk_node.webhook.admission import evaluate
from clerk_node.webhook.dispatcher import WorkflowDispatcher
from clerk_node.webhook.models import (
    AdmissionOutcome,
    ClerkWebhookPayload,
    EventEnvelope,
    InboundNotification,
    VerificationConfig,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# These will be injected at app startup
_config: VerificationConfig | None = None
_dispatcher: WorkflowDispatcher | None = None


def configure(config: VerificationConfig, dispatcher: WorkflowDispatcher) -> None:
    global _config, _dispatcher
    _config = config
    _dispatcher = dispatcher


@router.get("/webhook/clerk")
async def webhook_status():
    """Clerk endpoints are managed in the Clerk dashboard; report readiness only."""
    return {"ready": _config is not None and _dispatcher is not None}


@router.post("/webhook/clerk")
async def handle_webhook(request: Request, background_tasks: BackgroundTasks):
    """Verify a Clerk delivery and start the workflow if it is admitted."""
    if _config is None or _dispatcher is None:
        return JSONResponse(status_code=503, content={"error": "webhook receiver not configured"})

    raw_body = await request.body()
    try:
        body = json.loads(raw_body)
        ClerkWebhookPayload.model_validate(body)
    except (ValueError, ValidationError):
        logger.warning("Webhook body is not a valid Clerk event payload")
        return JSONResponse(status_code=400, content={"error": "invalid JSON body"})

    notification = InboundNotification.from_request(request.headers, body, raw_body)
    result = evaluate(notification, _config)

    if result.outcome is AdmissionOutcome.ACCEPT:
        background_tasks.add_task(_dispatch, result.envelope)

    return JSONResponse(status_code=result.status_code, content=result.body)


async def _dispatch(envelope: EventEnvelope) -> None:
    """Background task: forward an admitted event to the workflow runtime."""
    try:
        await _dispatcher.dispatch(envelope)
    except Exception:
        logger.exception("Error dispatching webhook %s", envelope.webhook_id)
