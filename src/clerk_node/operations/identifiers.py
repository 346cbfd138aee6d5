"""Allowlist and blocklist identifier operations."""

from clerk_node.clerk.shaping import clean_object, pick
from clerk_node.operations.registry import OperationContext, Resource, fetch_list, operation

ALLOWLIST = Resource.ALLOWLIST_IDENTIFIER
BLOCKLIST = Resource.BLOCKLIST_IDENTIFIER


@operation(ALLOWLIST, "create")
async def create_allowlist_identifier(ctx: OperationContext):
    body = {
        "identifier": ctx.required("identifier"),
        **pick(ctx.collection("additionalFields"), ("notify",)),
    }
    return await ctx.client.request("POST", "/allowlist_identifiers", clean_object(body))


@operation(ALLOWLIST, "get")
async def get_allowlist_identifier(ctx: OperationContext):
    return await ctx.client.request(
        "GET", f"/allowlist_identifiers/{ctx.required('identifierId')}"
    )


@operation(ALLOWLIST, "getAll")
async def get_all_allowlist_identifiers(ctx: OperationContext):
    return await fetch_list(ctx, "/allowlist_identifiers")


@operation(ALLOWLIST, "delete")
async def delete_allowlist_identifier(ctx: OperationContext):
    return await ctx.client.request(
        "DELETE", f"/allowlist_identifiers/{ctx.required('identifierId')}"
    )


@operation(BLOCKLIST, "create")
async def create_blocklist_identifier(ctx: OperationContext):
    return await ctx.client.request(
        "POST", "/blocklist_identifiers", {"identifier": ctx.required("identifier")}
    )


@operation(BLOCKLIST, "get")
async def get_blocklist_identifier(ctx: OperationContext):
    return await ctx.client.request(
        "GET", f"/blocklist_identifiers/{ctx.required('identifierId')}"
    )


@operation(BLOCKLIST, "getAll")
async def get_all_blocklist_identifiers(ctx: OperationContext):
    return await fetch_list(ctx, "/blocklist_identifiers")


@operation(BLOCKLIST, "delete")
async def delete_blocklist_identifier(ctx: OperationContext):
    return await ctx.client.request(
        "DELETE", f"/blocklist_identifiers/{ctx.required('identifierId')}"
    )
