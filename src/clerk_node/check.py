"""Credential check CLI: verify the configured Clerk secret key.

Lists a single user with the configured key, the same request the host
uses to test stored credentials. Exits non-zero if Clerk rejects it.
"""

import asyncio
import logging
import sys

from clerk_node.clerk.client import ClerkApiError, ClerkClient
from clerk_node.config import Settings

logger = logging.getLogger(__name__)


async def check_credentials() -> bool:
    settings = Settings()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client = ClerkClient(settings.clerk_secret_key, settings.clerk_api_version)
    try:
        await client.test_credentials()
    except ClerkApiError as exc:
        logger.error("Clerk rejected the credentials (status %s): %s", exc.status_code, exc)
        return False
    finally:
        await client.close()

    logger.info("Clerk credentials are valid")
    return True


def main():
    if not asyncio.run(check_credentials()):
        sys.exit(1)


if __name__ == "__main__":
    main()
