from clerk_node.clerk.shaping import clean_object, parse_metadata, pick
from clerk_node.operations.registry import (
    OperationContext,
    OperationError,
    Resource,
    fetch_list,
    operation,
)

JWT_TEMPLATE = Resource.JWT_TEMPLATE

SIGNING_ALGORITHMS = frozenset({
    "RS256", "RS384", "RS512",
    "ES256", "ES384", "ES512",
    "PS256", "PS384", "PS512",
    "HS256", "HS384", "HS512",
})

_TEMPLATE_FIELDS = (
    "lifetime",
    "allowedClockSkew",
    "customSigningKey",
    "signingAlgorithm",
    "signingKey",
)


def _template_options(fields: dict) -> dict:
    algorithm = fields.get("signingAlgorithm")
    if algorithm and algorithm not in SIGNING_ALGORITHMS:
        raise OperationError(f"Unsupported signing algorithm '{algorithm}'")
    return pick(fields, _TEMPLATE_FIELDS)


@operation(JWT_TEMPLATE, "create")
async def create_jwt_template(ctx: OperationContext):
    body = {
        "name": ctx.required("name"),
        "claims": parse_metadata(ctx.required("claims")),
        **_template_options(ctx.collection("additionalFields")),
    }
    return await ctx.client.request("POST", "/jwt_templates", clean_object(body))


@operation(JWT_TEMPLATE, "get")
async def get_jwt_template(ctx: OperationContext):
    return await ctx.client.request("GET", f"/jwt_templates/{ctx.required('templateId')}")


@operation(JWT_TEMPLATE, "getAll")
async def get_all_jwt_templates(ctx: OperationContext):
    return await fetch_list(ctx, "/jwt_templates")


@operation(JWT_TEMPLATE, "update")
async def update_jwt_template(ctx: OperationContext):
    path = f"/jwt_templates/{ctx.required('templateId')}"
    fields = ctx.collection("updateFields")
    body = {**pick(fields, ("name",)), **_template_options(fields)}
    if fields.get("claims"):
        body["claims"] = parse_metadata(fields["claims"])
    return await ctx.client.request("PATCH", path, clean_object(body))


@operation(JWT_TEMPLATE, "delete")
async def delete_jwt_template(ctx: OperationContext):
    return await ctx.client.request("DELETE", f"/jwt_templates/{ctx.required('templateId')}")
