"""Engagement domain models.

An Engagement is one instance of a tenant contracting a provider offering.
It is mutated only through the state machine, the consent ledger and the
result router.
"""

from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from liaison.engagement.enums import Audience, ConsentAction, EngagementStatus

# Payload keys that carry delivery metadata rather than result data
FILE_URL_KEYS = ("file_url", "fileUrl")
SUMMARY_KEY = "summary"


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class DeliveryRecord(BaseModel):
    """A deliverable handed back by the provider.

    Immutable once written; a later delivery of the same output type
    replaces the record as a whole.
    """

    model_config = ConfigDict(frozen=True)

    output_type: str = Field(..., description="Registered output type")
    payload: dict[str, Any] = Field(default_factory=dict, description="Opaque result payload")
    file_url: str | None = Field(default=None, description="Reference to an uploaded file")
    summary: str | None = Field(default=None, description="Short summary of the result")
    delivered_at: datetime = Field(default_factory=utc_now, description="Delivery time")

    @classmethod
    def from_payload(cls, output_type: str, payload: dict[str, Any]) -> "DeliveryRecord":
        """Build a record, lifting the file reference and summary out of the payload."""
        file_url = next(
            (payload[key] for key in FILE_URL_KEYS if isinstance(payload.get(key), str)),
            None,
        )
        summary = payload.get(SUMMARY_KEY)
        return cls(
            output_type=output_type,
            payload=payload,
            file_url=file_url,
            summary=summary if isinstance(summary, str) else None,
        )

    @property
    def data(self) -> dict[str, Any]:
        """Result data: the ``data`` member when present, else the payload body."""
        inner = self.payload.get("data")
        if isinstance(inner, dict):
            return inner
        return {
            key: value
            for key, value in self.payload.items()
            if key not in FILE_URL_KEYS and key != SUMMARY_KEY
        }


class IntegrationRecord(BaseModel):
    """Marks a delivery as consumed by the customer's process."""

    model_config = ConfigDict(frozen=True)

    integration_point: str = Field(..., description="Where the result was filed")
    integrated_at: datetime = Field(default_factory=utc_now, description="Integration time")


class ConsentEvent(BaseModel):
    """One grant or revocation of a data scope."""

    model_config = ConfigDict(frozen=True)

    scope: str = Field(..., description="Data scope key")
    action: ConsentAction = Field(..., description="Granted or revoked")
    at: datetime = Field(default_factory=utc_now, description="When it happened")


class Engagement(BaseModel):
    """A tenant-provider engagement aggregate."""

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    tenant_id: UUID = Field(..., description="Owning tenant")
    provider_id: UUID = Field(..., description="Contracted provider")
    offering_id: UUID = Field(..., description="Contracted offering")
    status: EngagementStatus = Field(
        default=EngagementStatus.DRAFT, description="Lifecycle status"
    )

    granted_scopes: set[str] = Field(
        default_factory=set, description="Currently granted data scopes"
    )
    consent_history: list[ConsentEvent] = Field(
        default_factory=list, description="Append-only grant/revoke log"
    )
    delivered_outputs: dict[str, DeliveryRecord] = Field(
        default_factory=dict, description="Latest delivery per output type"
    )
    integration_status: dict[str, IntegrationRecord] = Field(
        default_factory=dict, description="Integration per delivered output type"
    )

    partner_contact_name: str | None = Field(default=None, description="Provider contact")
    partner_contact_email: str | None = Field(default=None, description="Provider email")
    partner_contact_phone: str | None = Field(default=None, description="Provider phone")
    agreed_pricing: dict[str, Any] | None = Field(default=None, description="Agreed terms")
    scheduled_date: date | None = Field(default=None, description="Scheduled date")

    # Customer notes are never shown to the provider
    customer_notes: str | None = Field(default=None, description="Tenant-internal notes")
    partner_notes: str | None = Field(default=None, description="Notes from the provider")

    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    updated_at: datetime = Field(default_factory=utc_now, description="Last update")
    activated_at: datetime | None = Field(default=None, description="Activation time")
    completed_at: datetime | None = Field(default=None, description="Completion time")
    cancelled_at: datetime | None = Field(default=None, description="Cancellation time")

    version: int = Field(default=0, ge=0, description="Optimistic concurrency version")

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def touch(self) -> None:
        self.updated_at = utc_now()

    def has_granted_scope(self, scope: str) -> bool:
        return scope in self.granted_scopes

    def granted_scope_keys(self) -> list[str]:
        """Granted scopes in a stable order."""
        return sorted(self.granted_scopes)

    def has_delivered_output(self, output_type: str) -> bool:
        return output_type in self.delivered_outputs

    def delivered_output_keys(self) -> list[str]:
        return sorted(self.delivered_outputs)

    def is_integrated(self, output_type: str) -> bool:
        return output_type in self.integration_status

    def pending_outputs(self) -> list[str]:
        """Delivered output types that have not been integrated yet."""
        return [
            output_type
            for output_type in self.delivered_output_keys()
            if output_type not in self.integration_status
        ]

    def to_view(self, audience: Audience | str) -> dict[str, Any]:
        """Serialize the engagement for the given audience.

        Only the tenant view carries the tenant's notes and consent history.

        Raises:
            ValueError: If ``audience`` is not a known audience
        """
        audience = Audience(audience)
        exclude: set[str] = {"version"}
        if audience != Audience.TENANT:
            exclude |= {"customer_notes", "consent_history"}

        data = self.model_dump(mode="json", exclude=exclude)
        data["granted_scopes"] = self.granted_scope_keys()
        return data
