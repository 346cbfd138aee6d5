"""Run one Clerk operation over a batch of workflow items."""

import logging
from typing import Any

from clerk_node.clerk.client import ClerkApiError, ClerkClient
from clerk_node.operations import (  # noqa: F401  (modules register their handlers on import)
    contacts,
    identifiers,
    invitations,
    jwt_templates,
    organizations,
    sessions,
    users,
    webhooks,
)
from clerk_node.operations.registry import (
    OperationContext,
    OperationError,
    Resource,
    get_handler,
)

logger = logging.getLogger(__name__)


class OperationExecutor:
    def __init__(self, client: ClerkClient) -> None:
        self._client = client

    async def execute(
        self,
        resource: Resource | str,
        operation: str,
        items: list[dict[str, Any]],
        *,
        continue_on_fail: bool = False,
    ) -> list[dict[str, Any]]:
        """Execute ``resource``/``operation`` once per input item.

        Each item is ``{"params": {...}, "binary": {...}}``. List responses are
        flattened so every returned record becomes its own output item, paired
        with the index of the input item that produced it.
        """
        # Unsupported combinations fail the whole batch, not one item
        handler = get_handler(resource, operation)
        name = f"{Resource(resource).value}.{operation}"
        results: list[dict[str, Any]] = []

        for index, item in enumerate(items):
            ctx = OperationContext(
                client=self._client,
                params=item.get("params") or {},
                binary=item.get("binary") or {},
            )
            try:
                response = await handler(ctx)
            except Exception as exc:
                if continue_on_fail:
                    logger.warning("%s failed for item %d: %s", name, index, exc)
                    results.append({"json": {"error": str(exc)}, "pairedItem": {"item": index}})
                    continue
                if isinstance(exc, OperationError):
                    exc.item_index = index
                    raise
                raise OperationError(str(exc), item_index=index) from exc

            records = response if isinstance(response, list) else [response]
            results.extend({"json": record, "pairedItem": {"item": index}} for record in records)

        return results
