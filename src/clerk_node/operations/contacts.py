"""Email address and phone number operations.

Both resources hang off a user and share the same create/get/update/delete
shape; only the path and the optional flags differ.
"""

from clerk_node.clerk.shaping import clean_object, pick
from clerk_node.operations.registry import OperationContext, Resource, operation

EMAIL = Resource.EMAIL_ADDRESS
PHONE = Resource.PHONE_NUMBER

_EMAIL_FLAGS = ("verified", "primary")
_PHONE_CREATE_FLAGS = ("verified", "primary", "reservedForSecondFactor")
_PHONE_UPDATE_FLAGS = _PHONE_CREATE_FLAGS + ("defaultSecondFactor",)


# -- Email address --


@operation(EMAIL, "create")
async def create_email_address(ctx: OperationContext):
    body = {
        "user_id": ctx.required("userId"),
        "email_address": ctx.required("emailAddress"),
        **pick(ctx.collection("additionalFields"), _EMAIL_FLAGS),
    }
    return await ctx.client.request("POST", "/email_addresses", clean_object(body))


@operation(EMAIL, "get")
async def get_email_address(ctx: OperationContext):
    return await ctx.client.request("GET", f"/email_addresses/{ctx.required('emailAddressId')}")


@operation(EMAIL, "update")
async def update_email_address(ctx: OperationContext):
    path = f"/email_addresses/{ctx.required('emailAddressId')}"
    body = pick(ctx.collection("updateFields"), _EMAIL_FLAGS)
    return await ctx.client.request("PATCH", path, body)


@operation(EMAIL, "delete")
async def delete_email_address(ctx: OperationContext):
    return await ctx.client.request(
        "DELETE", f"/email_addresses/{ctx.required('emailAddressId')}"
    )


# -- Phone number --


@operation(PHONE, "create")
async def create_phone_number(ctx: OperationContext):
    body = {
        "user_id": ctx.required("userId"),
        "phone_number": ctx.required("phoneNumber"),
        **pick(ctx.collection("additionalFields"), _PHONE_CREATE_FLAGS),
    }
    return await ctx.client.request("POST", "/phone_numbers", clean_object(body))


@operation(PHONE, "get")
async def get_phone_number(ctx: OperationContext):
    return await ctx.client.request("GET", f"/phone_numbers/{ctx.required('phoneNumberId')}")


@operation(PHONE, "update")
async def update_phone_number(ctx: OperationContext):
    path = f"/phone_numbers/{ctx.required('phoneNumberId')}"
    body = pick(ctx.collection("updateFields"), _PHONE_UPDATE_FLAGS)
    return await ctx.client.request("PATCH", path, body)


@operation(PHONE, "delete")
async def delete_phone_number(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"/phone_numbers/{ctx.required('phoneNumberId')}")
