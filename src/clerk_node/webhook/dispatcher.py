"""Hand admitted events to the host workflow runtime."""

import logging
from typing import Protocol

import httpx

from clerk_node.webhook.models import EventEnvelope

logger = logging.getLogger(__name__)


class WorkflowDispatcher(Protocol):
    async def dispatch(self, envelope: EventEnvelope) -> None: ...

    async def close(self) -> None: ...


class HttpWorkflowDispatcher:
    """POST each envelope to the host's trigger endpoint."""

    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self._url = url
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def dispatch(self, envelope: EventEnvelope) -> None:
        resp = await self._client.post(self._url, json=envelope.to_json())
        resp.raise_for_status()
        logger.debug("Dispatched %s to %s (%d)", envelope.webhook_id, self._url, resp.status_code)


class LoggingDispatcher:
    """Used when no host endpoint is configured; just records the event."""

    async def close(self) -> None:
        pass

    async def dispatch(self, envelope: EventEnvelope) -> None:
        logger.info(
            "No workflow endpoint configured, dropping %s event %s",
            envelope.type, envelope.webhook_id,
        )
