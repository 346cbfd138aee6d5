from clerk_node.clerk.shaping import clean_object, metadata_body, pick
from clerk_node.operations.registry import OperationContext, Resource, fetch_list, operation

INVITATION = Resource.INVITATION


@operation(INVITATION, "create")
async def create_invitation(ctx: OperationContext):
    fields = ctx.collection("additionalFields")
    body = {
        "email_address": ctx.required("emailAddress"),
        **pick(fields, ("redirectUrl", "expiresInDays", "notify", "ignoreExisting")),
        **metadata_body(fields, ("publicMetadata",)),
    }
    return await ctx.client.request("POST", "/invitations", clean_object(body))


@operation(INVITATION, "get")
async def get_invitation(ctx: OperationContext):
    return await ctx.client.request("GET", f"/invitations/{ctx.required('invitationId')}")


@operation(INVITATION, "getAll")
async def get_all_invitations(ctx: OperationContext):
    query = pick(ctx.collection("filters"), ("status", "query", "orderBy"))
    return await fetch_list(ctx, "/invitations", query)


@operation(INVITATION, "revoke")
async def revoke_invitation(ctx: OperationContext):
    return await ctx.client.request(
        "POST", f"/invitations/{ctx.required('invitationId')}/revoke"
    )
