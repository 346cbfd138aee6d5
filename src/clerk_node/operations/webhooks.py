"""Svix webhook endpoint management through the Clerk API."""

from clerk_node.operations.registry import OperationContext, Resource, fetch_list, operation

WEBHOOK = Resource.WEBHOOK
SVIX_PATH = "/webhooks/svix"


@operation(WEBHOOK, "create")
async def create_webhook(ctx: OperationContext):
    return await ctx.client.request(
        "POST", SVIX_PATH, {"endpoint_url": ctx.required("endpointUrl")}
    )


@operation(WEBHOOK, "get")
async def get_webhook(ctx: OperationContext):
    return await ctx.client.request("GET", f"{SVIX_PATH}/{ctx.required('webhookId')}")


@operation(WEBHOOK, "getAll")
async def get_all_webhooks(ctx: OperationContext):
    return await fetch_list(ctx, SVIX_PATH)


@operation(WEBHOOK, "update")
async def update_webhook(ctx: OperationContext):
    path = f"{SVIX_PATH}/{ctx.required('webhookId')}"
    body = {}
    endpoint_url = ctx.collection("updateFields").get("endpointUrl")
    if endpoint_url:
        body["endpoint_url"] = endpoint_url
    return await ctx.client.request("PATCH", path, body)


@operation(WEBHOOK, "delete")
async def delete_webhook(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"{SVIX_PATH}/{ctx.required('webhookId')}")
