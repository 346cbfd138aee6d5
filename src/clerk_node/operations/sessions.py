from clerk_node.clerk.shaping import pick
from clerk_node.operations.registry import OperationContext, Resource, fetch_list, operation

SESSION = Resource.SESSION


@operation(SESSION, "get")
async def get_session(ctx: OperationContext):
    return await ctx.client.request("GET", f"/sessions/{ctx.required('sessionId')}")


@operation(SESSION, "getAll")
async def get_all_sessions(ctx: OperationContext):
    query = pick(ctx.collection("filters"), ("clientId", "userId", "status"))
    return await fetch_list(ctx, "/sessions", query)


@operation(SESSION, "revoke")
async def revoke_session(ctx: OperationContext):
    return await ctx.client.request("POST", f"/sessions/{ctx.required('sessionId')}/revoke")


@operation(SESSION, "verify")
async def verify_session(ctx: OperationContext):
    session_id = ctx.required("sessionId")
    return await ctx.client.request(
        "POST", f"/sessions/{session_id}/verify", {"token": ctx.required("token")}
    )
