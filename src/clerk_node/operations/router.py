"""HTTP surface the host uses to invoke Clerk operations."""

import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from clerk_node.clerk.client import ClerkApiError
from clerk_node.operations.executor import OperationExecutor
from clerk_node.operations.registry import (
    OperationError,
    UnsupportedOperationError,
    registered_operations,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Injected at app startup
_executor: OperationExecutor | None = None


def configure(executor: OperationExecutor) -> None:
    global _executor
    _executor = executor


class OperationItem(BaseModel):
    params: dict[str, Any] = {}
    binary: dict[str, dict[str, Any]] = {}


class OperationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[OperationItem] = Field(default_factory=lambda: [OperationItem()])
    continue_on_fail: bool = Field(default=False, alias="continueOnFail")


@router.get("/operations")
async def list_operations():
    return registered_operations()


@router.post("/operations/{resource}/{operation}")
async def run_operation(resource: str, operation: str, request: OperationRequest):
    if _executor is None:
        raise HTTPException(status_code=503, detail="Clerk client not configured")

    try:
        items = await _executor.execute(
            resource,
            operation,
            [item.model_dump() for item in request.items],
            continue_on_fail=request.continue_on_fail,
        )
    except UnsupportedOperationError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except OperationError as exc:
        cause = exc.__cause__
        if isinstance(cause, ClerkApiError):
            status = cause.status_code if cause.status_code and cause.status_code < 500 else 502
        else:
            status = 400
        logger.warning("%s.%s failed on item %s: %s", resource, operation, exc.item_index, exc)
        raise HTTPException(
            status_code=status,
            detail={"message": str(exc), "itemIndex": exc.item_index},
        ) from exc

    return {"items": items}
