"""Lookup table from (resource, operation) to the coroutine that performs it.

Handlers register themselves with the ``operation`` decorator when their
module is imported, so the table is complete once ``clerk_node.operations.
executor`` has been imported.
"""

import base64
import binascii
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from clerk_node.clerk.client import ClerkClient, JsonValue

DEFAULT_LIST_LIMIT = 50


class Resource(Enum):
    ALLOWLIST_IDENTIFIER = "allowlistIdentifier"
    BLOCKLIST_IDENTIFIER = "blocklistIdentifier"
    EMAIL_ADDRESS = "emailAddress"
    INVITATION = "invitation"
    JWT_TEMPLATE = "jwtTemplate"
    ORGANIZATION = "organization"
    ORGANIZATION_INVITATION = "organizationInvitation"
    ORGANIZATION_MEMBERSHIP = "organizationMembership"
    PHONE_NUMBER = "phoneNumber"
    SESSION = "session"
    USER = "user"
    WEBHOOK = "webhook"


@dataclass(frozen=True)
class OperationKey:
    resource: Resource
    operation: str

    def __str__(self) -> str:
        return f"{self.resource.value}.{self.operation}"


class OperationError(Exception):
    """An operation could not be performed for one input item."""

    def __init__(self, message: str, item_index: int | None = None):
        self.item_index = item_index
        super().__init__(message)


class UnsupportedOperationError(OperationError):
    """No handler is registered for the requested resource/operation pair."""


@dataclass
class OperationContext:
    """Everything a handler sees for one input item."""

    client: ClerkClient
    params: dict[str, Any]
    binary: dict[str, dict[str, Any]] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)

    def required(self, name: str) -> Any:
        value = self.params.get(name)
        if value is None or value == "":
            raise OperationError(f"Missing required parameter '{name}'")
        return value

    def collection(self, name: str) -> dict[str, Any]:
        """An optional group of fields such as ``additionalFields`` or ``filters``."""
        return self.params.get(name) or {}

    def binary_file(self, property_name: str, default_name: str) -> tuple[str, bytes, str | None]:
        """Resolve ``(file_name, content, mime_type)`` from the item's binary data."""
        entry = self.binary.get(property_name)
        if not entry or "data" not in entry:
            raise OperationError(f"No binary data found in property '{property_name}'")
        try:
            content = base64.b64decode(entry["data"])
        except (binascii.Error, ValueError):
            raise OperationError(f"Binary property '{property_name}' is not valid base64") from None
        return entry.get("fileName") or default_name, content, entry.get("mimeType")


Handler = Callable[[OperationContext], Awaitable[JsonValue]]

_HANDLERS: dict[OperationKey, Handler] = {}


def operation(resource: Resource, name: str) -> Callable[[Handler], Handler]:
    """Register ``func`` as the handler for ``resource``/``name``."""

    def decorator(func: Handler) -> Handler:
        key = OperationKey(resource, name)
        if key in _HANDLERS:
            raise ValueError(f"Duplicate handler for {key}")
        _HANDLERS[key] = func
        return func

    return decorator


def get_handler(resource: Resource | str, name: str) -> Handler:
    try:
        resource = Resource(resource)
    except ValueError:
        raise UnsupportedOperationError(f"Unknown resource '{resource}'") from None
    handler = _HANDLERS.get(OperationKey(resource, name))
    if handler is None:
        raise UnsupportedOperationError(
            f"Operation '{name}' is not supported for resource '{resource.value}'"
        )
    return handler


def registered_operations() -> dict[str, list[str]]:
    """Map each resource to its supported operation names."""
    table: dict[str, list[str]] = {}
    for key in sorted(_HANDLERS, key=str):
        table.setdefault(key.resource.value, []).append(key.operation)
    return table


async def fetch_list(
    ctx: OperationContext,
    endpoint: str,
    query: dict | None = None,
) -> list:
    """Shared ``getAll`` behaviour: everything when ``returnAll``, else up to ``limit``."""
    if ctx.get("returnAll", False):
        return await ctx.client.request_all_items("GET", endpoint, query=query)
    limit = int(ctx.get("limit", DEFAULT_LIST_LIMIT))
    return await ctx.client.request_all_items("GET", endpoint, query=query, limit=limit)
