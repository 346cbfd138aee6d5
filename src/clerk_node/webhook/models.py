"""Models for inbound Clerk (Svix-signed) webhook deliveries."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SVIX_ID_HEADER = "svix-id"
SVIX_TIMESTAMP_HEADER = "svix-timestamp"
SVIX_SIGNATURE_HEADER = "svix-signature"

DEFAULT_TOLERANCE_SECONDS = 300

# Events a Clerk instance can deliver to the trigger
CLERK_EVENT_TYPES: frozenset[str] = frozenset({
    "email.created",
    "organization.created",
    "organization.deleted",
    "organization.updated",
    "organizationInvitation.accepted",
    "organizationInvitation.created",
    "organizationInvitation.revoked",
    "organizationMembership.created",
    "organizationMembership.deleted",
    "organizationMembership.updated",
    "session.created",
    "session.ended",
    "session.removed",
    "session.revoked",
    "sms.created",
    "user.created",
    "user.deleted",
    "user.updated",
})


class ClerkWebhookPayload(BaseModel):
    """Top-level body of a Clerk webhook delivery.

    Only ``type`` and ``data`` are guaranteed; everything else is kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    type: str | None = None  # e.g. "user.created"
    data: Any = None
    object: str | None = None  # usually "event"


class EventEnvelope(BaseModel):
    """Normalized event handed to the host workflow."""

    model_config = ConfigDict(populate_by_name=True)

    type: str | None = None
    data: Any = None
    object: Any = None
    timestamp: str | None = None
    webhook_id: str | None = Field(default=None, alias="webhookId")
    raw: dict[str, Any]

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


@dataclass(frozen=True)
class VerificationConfig:
    secret: str = ""
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS
    skip_verification: bool = False
    selected_event_types: frozenset[str] = frozenset()  # empty = all events


@dataclass(frozen=True)
class InboundNotification:
    """One HTTP delivery, already split into its signing inputs."""

    message_id: str | None
    timestamp: str | None
    signature_header: str | None
    body: dict[str, Any]
    raw_body: bytes | None = None

    @property
    def event_type(self) -> str | None:
        value = self.body.get("type")
        return value if isinstance(value, str) else None

    @classmethod
    def from_request(
        cls,
        headers: Mapping[str, str],
        body: dict[str, Any],
        raw_body: bytes | None = None,
    ) -> "InboundNotification":
        """Build a notification from transport headers (matched case-insensitively)."""
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            message_id=lowered.get(SVIX_ID_HEADER),
            timestamp=lowered.get(SVIX_TIMESTAMP_HEADER),
            signature_header=lowered.get(SVIX_SIGNATURE_HEADER),
            body=body,
            raw_body=raw_body,
        )


class AdmissionOutcome(Enum):
    ACCEPT = "accept"
    DROP = "drop"  # acknowledged, event type not selected
    REJECT = "reject"


@dataclass(frozen=True)
class AdmissionResult:
    outcome: AdmissionOutcome
    status_code: int
    body: dict[str, Any] = field(default_factory=dict)
    envelope: EventEnvelope | None = None

    @property
    def accepted(self) -> bool:
        return self.outcome is AdmissionOutcome.ACCEPT
