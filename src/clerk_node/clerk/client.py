import asyncio
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CLERK_API_BASE = "https://api.clerk.com/v1"
PAGE_SIZE = 100

JsonValue = dict[str, Any] | list[Any]


class ClerkApiError(Exception):
    """Raised for any failed call to the Clerk Backend API."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        self.status_code = status_code
        self.code = code
        super().__init__(message)


def parse_clerk_error(resp: httpx.Response) -> tuple[str, str | None]:
    """Pull a readable message (and error code) out of a Clerk error response."""
    try:
        errors = resp.json().get("errors") or []
    except (ValueError, AttributeError):
        errors = []

    if errors and isinstance(errors[0], dict):
        first = errors[0]
        message = first.get("long_message") or first.get("message") or "Unknown Clerk API error"
        return message, first.get("code")

    return resp.reason_phrase or "Unknown Clerk API error", None


class ClerkClient:
    def __init__(
        self,
        secret_key: str,
        api_version: str | None = None,
        *,
        base_url: str = CLERK_API_BASE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        # httpx adds the JSON or multipart content type per request
        headers = {"Authorization": f"Bearer {secret_key}"}
        if api_version:
            headers["Clerk-API-Version"] = api_version
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=30.0,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, endpoint: str, **kwargs) -> httpx.Response:
        """Make a request with rate-limit handling, mapping failures to ClerkApiError."""
        try:
            resp = await self._client.request(method, endpoint, **kwargs)

            if resp.status_code == 429:
                retry_after = int(resp.headers.get("Retry-After", "5"))
                logger.warning("Clerk rate limited, retrying after %d seconds", retry_after)
                await asyncio.sleep(retry_after)
                resp = await self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as exc:
            raise ClerkApiError(f"Request to Clerk failed: {exc}") from exc

        if resp.is_error:
            message, code = parse_clerk_error(resp)
            logger.debug("Clerk %s %s -> %d: %s", method, endpoint, resp.status_code, message)
            raise ClerkApiError(message, status_code=resp.status_code, code=code)
        return resp

    @staticmethod
    def _decode(resp: httpx.Response) -> JsonValue:
        if not resp.content:
            return {}
        return resp.json()

    async def request(
        self,
        method: str,
        endpoint: str,
        body: dict | None = None,
        query: dict | None = None,
    ) -> JsonValue:
        """Make an authenticated JSON request to the Clerk API."""
        kwargs: dict[str, Any] = {}
        if body and method.upper() != "GET":
            kwargs["json"] = body
        if query:
            kwargs["params"] = query
        resp = await self._send(method, endpoint, **kwargs)
        return self._decode(resp)

    async def request_all_items(
        self,
        method: str,
        endpoint: str,
        query: dict | None = None,
        limit: int | None = None,
    ) -> list:
        """Follow offset/limit pagination and return every item, up to ``limit``."""
        results: list = []
        offset = 0
        max_items = limit if limit is not None else float("inf")

        while True:
            page_query = {
                **(query or {}),
                "limit": int(min(PAGE_SIZE, max_items - len(results))),
                "offset": offset,
            }
            response = await self.request(method, endpoint, query=page_query)

            items = response.get("data", response) if isinstance(response, dict) else response
            if not isinstance(items, list):
                results.append(items)
                break

            results.extend(items)
            if len(items) < PAGE_SIZE or len(results) >= max_items:
                break
            offset += PAGE_SIZE

        if limit is not None:
            return results[:limit]
        return results

    async def upload(
        self,
        method: str,
        endpoint: str,
        file_name: str,
        content: bytes,
        content_type: str | None = None,
    ) -> JsonValue:
        """Upload a file as multipart/form-data (profile images, logos)."""
        files = {"file": (file_name, content, content_type or "application/octet-stream")}
        resp = await self._send(method, endpoint, files=files)
        return self._decode(resp)

    async def test_credentials(self) -> bool:
        """Check the secret key by listing a single user."""
        await self.request("GET", "/users", query={"limit": 1})
        return True
