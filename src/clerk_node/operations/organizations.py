"""Organization, organization membership and organization invitation operations."""

from clerk_node.clerk.shaping import clean_object, metadata_body, pick, split_list
from clerk_node.operations.registry import OperationContext, Resource, fetch_list, operation

ORGANIZATION = Resource.ORGANIZATION
MEMBERSHIP = Resource.ORGANIZATION_MEMBERSHIP
INVITATION = Resource.ORGANIZATION_INVITATION

_ORG_METADATA = ("publicMetadata", "privateMetadata")


def _org_path(ctx: OperationContext) -> str:
    return f"/organizations/{ctx.required('organizationId')}"


# -- Organization --


@operation(ORGANIZATION, "create")
async def create_organization(ctx: OperationContext):
    fields = ctx.collection("additionalFields")
    body = {
        "name": ctx.required("name"),
        "created_by": ctx.required("createdBy"),
        **pick(fields, ("slug", "maxAllowedMemberships")),
        **metadata_body(fields, _ORG_METADATA),
    }
    return await ctx.client.request("POST", "/organizations", clean_object(body))


@operation(ORGANIZATION, "get")
async def get_organization(ctx: OperationContext):
    return await ctx.client.request("GET", _org_path(ctx))


@operation(ORGANIZATION, "getAll")
async def get_all_organizations(ctx: OperationContext):
    filters = ctx.collection("filters")
    query = pick(filters, ("query", "orderBy", "includeMembersCount"))
    if filters.get("userId"):
        query["user_id"] = split_list(filters["userId"])
    return await fetch_list(ctx, "/organizations", query)


@operation(ORGANIZATION, "update")
async def update_organization(ctx: OperationContext):
    path = _org_path(ctx)
    fields = ctx.collection("updateFields")
    body = {
        **pick(fields, ("name", "slug", "maxAllowedMemberships", "adminDeleteEnabled")),
        **metadata_body(fields, _ORG_METADATA),
    }
    return await ctx.client.request("PATCH", path, clean_object(body))


@operation(ORGANIZATION, "delete")
async def delete_organization(ctx: OperationContext):
    return await ctx.client.request("DELETE", _org_path(ctx))


@operation(ORGANIZATION, "updateLogo")
async def update_logo(ctx: OperationContext):
    path = _org_path(ctx)
    file_name, content, mime_type = ctx.binary_file(
        ctx.get("binaryPropertyName", "data"), "logo.png"
    )
    return await ctx.client.upload("PUT", f"{path}/logo", file_name, content, mime_type)


@operation(ORGANIZATION, "deleteLogo")
async def delete_logo(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"{_org_path(ctx)}/logo")


@operation(ORGANIZATION, "updateMetadata")
async def update_organization_metadata(ctx: OperationContext):
    path = _org_path(ctx)
    body = metadata_body(ctx.collection("metadata"), _ORG_METADATA)
    return await ctx.client.request("PATCH", f"{path}/metadata", body)


# -- Organization membership --


@operation(MEMBERSHIP, "create")
async def create_membership(ctx: OperationContext):
    body = {"user_id": ctx.required("userId"), "role": ctx.required("role")}
    return await ctx.client.request("POST", f"{_org_path(ctx)}/memberships", body)


@operation(MEMBERSHIP, "get")
async def get_membership(ctx: OperationContext):
    return await ctx.client.request(
        "GET", f"{_org_path(ctx)}/memberships/{ctx.required('userId')}"
    )


@operation(MEMBERSHIP, "getAll")
async def get_all_memberships(ctx: OperationContext):
    path = _org_path(ctx)
    filters = ctx.collection("filters")
    query = pick(filters, ("query", "orderBy"))
    if filters.get("userId"):
        query["user_id"] = split_list(filters["userId"])
    if filters.get("role"):
        query["role"] = split_list(filters["role"])
    return await fetch_list(ctx, f"{path}/memberships", query)


@operation(MEMBERSHIP, "update")
async def update_membership(ctx: OperationContext):
    path = f"{_org_path(ctx)}/memberships/{ctx.required('userId')}"
    return await ctx.client.request("PATCH", path, {"role": ctx.required("role")})


@operation(MEMBERSHIP, "delete")
async def delete_membership(ctx: OperationContext):
    return await ctx.client.request(
        "DELETE", f"{_org_path(ctx)}/memberships/{ctx.required('userId')}"
    )


# -- Organization invitation --


@operation(INVITATION, "create")
async def create_organization_invitation(ctx: OperationContext):
    path = _org_path(ctx)
    fields = ctx.collection("additionalFields")
    body = {
        "email_address": ctx.required("emailAddress"),
        "role": ctx.required("role"),
        "inviter_user_id": ctx.required("inviterUserId"),
        **pick(fields, ("redirectUrl", "expiresInDays")),
        **metadata_body(fields, _ORG_METADATA),
    }
    return await ctx.client.request("POST", f"{path}/invitations", clean_object(body))


@operation(INVITATION, "get")
async def get_organization_invitation(ctx: OperationContext):
    return await ctx.client.request(
        "GET", f"{_org_path(ctx)}/invitations/{ctx.required('invitationId')}"
    )


@operation(INVITATION, "getAll")
async def get_all_organization_invitations(ctx: OperationContext):
    path = _org_path(ctx)
    query = pick(ctx.collection("filters"), ("status", "orderBy"))
    return await fetch_list(ctx, f"{path}/invitations", query)


@operation(INVITATION, "revoke")
async def revoke_organization_invitation(ctx: OperationContext):
    path = f"{_org_path(ctx)}/invitations/{ctx.required('invitationId')}/revoke"
    body = {"requesting_user_id": ctx.required("requestingUserId")}
    return await ctx.client.request("POST", path, body)


@operation(INVITATION, "getBulk")
async def get_organization_invitations_bulk(ctx: OperationContext):
    ids = split_list(ctx.required("invitationIds"))
    return await ctx.client.request(
        "GET", "/organization_invitations", query={"organization_invitation_id": ids}
    )
