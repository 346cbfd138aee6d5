"""User operations."""

from clerk_node.clerk.shaping import (
    build_list_query,
    clean_object,
    metadata_body,
    pick,
    split_list,
    to_iso8601,
)
from clerk_node.operations.registry import OperationContext, Resource, fetch_list, operation

USER = Resource.USER

_CREATE_FIELDS = (
    "username",
    "password",
    "firstName",
    "lastName",
    "externalId",
    "skipPasswordChecks",
    "skipPasswordRequirement",
    "totpSecret",
)

_UPDATE_FIELDS = (
    "username",
    "password",
    "firstName",
    "lastName",
    "externalId",
    "primaryEmailAddressId",
    "primaryPhoneNumberId",
    "primaryWeb3WalletId",
    "profileImageId",
    "skipPasswordChecks",
    "signOutOfOtherSessions",
    "totpSecret",
    "deleteSelfEnabled",
    "createOrganizationEnabled",
    "createOrganizationsLimit",
)


def _user_id(ctx: OperationContext) -> str:
    return ctx.required("userId")


@operation(USER, "create")
async def create_user(ctx: OperationContext):
    fields = ctx.collection("additionalFields")
    body = pick(fields, _CREATE_FIELDS)
    if fields.get("emailAddress"):
        body["email_address"] = split_list(fields["emailAddress"])
    if fields.get("phoneNumber"):
        body["phone_number"] = split_list(fields["phoneNumber"])
    if fields.get("backupCodes"):
        body["backup_codes"] = split_list(fields["backupCodes"])
    if fields.get("createdAt"):
        body["created_at"] = to_iso8601(fields["createdAt"])
    body.update(metadata_body(fields))
    return await ctx.client.request("POST", "/users", clean_object(body))


@operation(USER, "get")
async def get_user(ctx: OperationContext):
    return await ctx.client.request("GET", f"/users/{_user_id(ctx)}")


@operation(USER, "getAll")
async def get_all_users(ctx: OperationContext):
    query = build_list_query(ctx.collection("filters"))
    return await fetch_list(ctx, "/users", query)


@operation(USER, "update")
async def update_user(ctx: OperationContext):
    user_id = _user_id(ctx)
    fields = ctx.collection("updateFields")
    body = pick(fields, _UPDATE_FIELDS)
    if fields.get("backupCodes"):
        body["backup_codes"] = split_list(fields["backupCodes"])
    body.update(metadata_body(fields))
    return await ctx.client.request("PATCH", f"/users/{user_id}", clean_object(body))


@operation(USER, "delete")
async def delete_user(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"/users/{_user_id(ctx)}")


@operation(USER, "ban")
async def ban_user(ctx: OperationContext):
    return await ctx.client.request("POST", f"/users/{_user_id(ctx)}/ban")


@operation(USER, "unban")
async def unban_user(ctx: OperationContext):
    return await ctx.client.request("POST", f"/users/{_user_id(ctx)}/unban")


@operation(USER, "lock")
async def lock_user(ctx: OperationContext):
    return await ctx.client.request("POST", f"/users/{_user_id(ctx)}/lock")


@operation(USER, "unlock")
async def unlock_user(ctx: OperationContext):
    return await ctx.client.request("POST", f"/users/{_user_id(ctx)}/unlock")


@operation(USER, "getCount")
async def count_users(ctx: OperationContext):
    return await ctx.client.request("GET", "/users/count")


@operation(USER, "verifyPassword")
async def verify_password(ctx: OperationContext):
    user_id = _user_id(ctx)
    return await ctx.client.request(
        "POST", f"/users/{user_id}/verify_password", {"password": ctx.required("password")}
    )


@operation(USER, "verifyTOTP")
async def verify_totp(ctx: OperationContext):
    user_id = _user_id(ctx)
    return await ctx.client.request(
        "POST", f"/users/{user_id}/verify_totp", {"code": ctx.required("code")}
    )


@operation(USER, "disableMFA")
async def disable_mfa(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"/users/{_user_id(ctx)}/mfa")


@operation(USER, "getOrganizationMemberships")
async def get_organization_memberships(ctx: OperationContext):
    return await ctx.client.request_all_items(
        "GET", f"/users/{_user_id(ctx)}/organization_memberships"
    )


@operation(USER, "setProfileImage")
async def set_profile_image(ctx: OperationContext):
    user_id = _user_id(ctx)
    file_name, content, mime_type = ctx.binary_file(
        ctx.get("binaryPropertyName", "data"), "profile.png"
    )
    return await ctx.client.upload(
        "POST", f"/users/{user_id}/profile_image", file_name, content, mime_type
    )


@operation(USER, "deleteProfileImage")
async def delete_profile_image(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"/users/{_user_id(ctx)}/profile_image")


@operation(USER, "updateMetadata")
async def update_user_metadata(ctx: OperationContext):
    user_id = _user_id(ctx)
    body = metadata_body(ctx.collection("metadata"))
    return await ctx.client.request("PATCH", f"/users/{user_id}/metadata", body)
