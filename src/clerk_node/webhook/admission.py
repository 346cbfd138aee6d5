"""Svix signature verification and admission of inbound Clerk events.

Clerk delivers webhooks through Svix. Each delivery carries three headers:

    svix-id         unique message id
    svix-timestamp  unix seconds at signing time
    svix-signature  space-separated "v1,<base64 hmac>" tokens

The MAC is HMAC-SHA256 over ``"{svix-id}.{svix-timestamp}.{body}"`` keyed
with the base64-decoded signing secret (``whsec_`` prefix removed).
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import re
import time
from typing import Any

from clerk_node.webhook.models import (
    AdmissionOutcome,
    AdmissionResult,
    EventEnvelope,
    InboundNotification,
    VerificationConfig,
)

logger = logging.getLogger(__name__)

SECRET_PREFIX = "whsec_"
SIGNATURE_VERSION = "v1"
_TIMESTAMP_RE = re.compile(r"\d+", re.ASCII)


class WebhookVerificationError(Exception):
    """Base class for deliveries that fail verification (HTTP 400)."""

    status_code = 400
    reason = "webhook verification failed"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.reason)


class MissingHeadersError(WebhookVerificationError):
    reason = "missing required signature headers"


class TimestampOutOfToleranceError(WebhookVerificationError):
    reason = "timestamp outside tolerance"


class InvalidSignatureError(WebhookVerificationError):
    reason = "invalid signature"


def signing_key(secret: str) -> bytes:
    """Decode a Svix signing secret into raw HMAC key bytes."""
    if secret.startswith(SECRET_PREFIX):
        secret = secret[len(SECRET_PREFIX):]
    return base64.b64decode(secret)


def canonical_body(body: bytes | str | dict[str, Any]) -> bytes:
    """Bytes covered by the signature.

    Raw bytes are used verbatim. A parsed body is re-serialized as compact JSON,
    which only matches the sender if its serializer made the same choices.
    """
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def compute_signature(
    secret: str,
    message_id: str,
    timestamp: str | int,
    body: bytes | str | dict[str, Any],
) -> str:
    """Return the base64 HMAC-SHA256 Svix signature for one delivery."""
    signed_content = f"{message_id}.{timestamp}.".encode("utf-8") + canonical_body(body)
    digest = hmac.new(signing_key(secret), signed_content, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def parse_signature_header(header: str) -> list[tuple[str, str]]:
    """Split ``"v1,abc v1,def"`` into ``[("v1", "abc"), ("v1", "def")]``."""
    signatures = []
    for token in header.split():
        version, _, value = token.partition(",")
        signatures.append((version, value))
    return signatures


def verify_notification(
    notification: InboundNotification,
    secret: str,
    tolerance_seconds: int,
    now: int | None = None,
) -> None:
    """Run the header, timestamp and signature checks.

    Raises a WebhookVerificationError subclass on the first failing check.
    """
    if not (notification.message_id and notification.timestamp and notification.signature_header):
        raise MissingHeadersError()

    if not _TIMESTAMP_RE.fullmatch(notification.timestamp):
        raise TimestampOutOfToleranceError(f"unparseable timestamp {notification.timestamp!r}")
    timestamp = int(notification.timestamp)

    current = int(time.time()) if now is None else now
    if abs(current - timestamp) > tolerance_seconds:
        raise TimestampOutOfToleranceError(
            f"timestamp {timestamp} is {current - timestamp}s from server time"
        )

    try:
        key = signing_key(secret)
    except (binascii.Error, ValueError):
        logger.error("Webhook signing secret is not valid base64")
        raise InvalidSignatureError("signing secret could not be decoded") from None
    # Never verify against an empty key
    if not key:
        logger.error("No webhook signing secret configured, rejecting delivery")
        raise InvalidSignatureError("no signing secret configured")

    body = notification.raw_body if notification.raw_body is not None else notification.body
    expected = compute_signature(secret, notification.message_id, notification.timestamp, body)

    expected_bytes = expected.encode("ascii")
    for version, value in parse_signature_header(notification.signature_header):
        if version == SIGNATURE_VERSION and hmac.compare_digest(value.encode("utf-8"), expected_bytes):
            return

    raise InvalidSignatureError()


def _reject(exc: WebhookVerificationError) -> AdmissionResult:
    return AdmissionResult(
        outcome=AdmissionOutcome.REJECT,
        status_code=exc.status_code,
        body={"error": exc.reason},
    )


def evaluate(
    notification: InboundNotification,
    config: VerificationConfig,
    now: int | None = None,
) -> AdmissionResult:
    """Decide whether a delivery starts a workflow.

    ACCEPT carries the normalized envelope. DROP acknowledges an event type
    that is not selected (200, so the sender does not retry). REJECT is a
    400 for deliveries failing verification.
    """
    if config.skip_verification:
        logger.debug("Signature verification skipped for %s", notification.message_id)
    else:
        try:
            verify_notification(notification, config.secret, config.tolerance_seconds, now)
        except WebhookVerificationError as exc:
            logger.warning(
                "Rejected webhook %s: %s (%s)", notification.message_id, exc.reason, exc
            )
            return _reject(exc)

    event_type = notification.event_type
    if config.selected_event_types and event_type not in config.selected_event_types:
        logger.debug("Event type %s not selected, acknowledging only", event_type)
        return AdmissionResult(
            outcome=AdmissionOutcome.DROP,
            status_code=200,
            body={"received": True, "processed": False},
        )

    envelope = EventEnvelope(
        type=event_type,
        data=notification.body.get("data"),
        object=notification.body.get("object"),
        timestamp=notification.timestamp,
        webhook_id=notification.message_id,
        raw=notification.body,
    )
    logger.info("Admitted webhook %s (%s)", notification.message_id, event_type)
    return AdmissionResult(
        outcome=AdmissionOutcome.ACCEPT,
        status_code=200,
        body={"received": True, "processed": True},
        envelope=envelope,
    )
