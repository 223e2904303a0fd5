"""Result models returned by engagement operations.

Every operation reports ``success`` and, on failure, an ``OperationError``.
Failed operations leave the engagement unchanged.
"""

from datetime import datetime
from typing import Any, Self
from uuid import UUID

from pydantic import BaseModel, Field

from liaison.engagement.enums import EngagementStatus
from liaison.engagement.models import Engagement
from liaison.errors import ErrorCode, OperationError
from liaison.registry.models import Sensitivity


class OperationResult(BaseModel):
    """Base for all operation results."""

    success: bool = Field(..., description="Whether the operation succeeded")
    error: OperationError | None = Field(default=None, description="Why it failed")

    @classmethod
    def fail(
        cls,
        code: ErrorCode,
        message: str,
        **fields: Any,
    ) -> Self:
        """Build a failed result.

        Keyword arguments named after result fields populate those fields;
        the rest become error details.
        """
        own = {key: value for key, value in fields.items() if key in cls.model_fields}
        details = {key: value for key, value in fields.items() if key not in cls.model_fields}
        return cls(
            success=False,
            error=OperationError(code=code, message=message, details=details),
            **own,
        )

    @property
    def error_code(self) -> ErrorCode | None:
        return self.error.code if self.error else None


class EngagementResult(OperationResult):
    """Result carrying the affected engagement."""

    engagement: Engagement | None = None


class TransitionResult(EngagementResult):
    """Result of a status transition."""

    from_status: EngagementStatus | None = None
    to_status: EngagementStatus | None = None


class GrantResult(OperationResult):
    """Result of granting data scopes."""

    granted_scopes: list[str] = Field(default_factory=list)
    newly_granted: list[str] = Field(default_factory=list)
    already_granted: list[str] = Field(default_factory=list)
    all_required_granted: bool = False
    data_shared: bool = Field(
        default=False, description="The grant advanced the engagement to data_shared"
    )


class RevokeResult(OperationResult):
    """Result of revoking one data scope."""

    revoked_scope: str | None = None
    remaining_scopes: list[str] = Field(default_factory=list)


class ScopeStatus(BaseModel):
    """Grant state of one required scope."""

    label: str
    description: str = ""
    sensitivity: Sensitivity | None = None
    granted: bool


class DataAccessStatus(OperationResult):
    """Grant state of every scope the offering requires."""

    required_scopes: dict[str, ScopeStatus] = Field(default_factory=dict)
    all_granted: bool = False
    granted_count: int = 0
    required_count: int = 0


class DeliveryResult(OperationResult):
    """Result of recording a provider deliverable."""

    output_type: str | None = None
    integration_point: str | None = None
    delivered_outputs: list[str] = Field(default_factory=list)
    status_advanced: bool = Field(
        default=False, description="The delivery advanced the engagement to delivered"
    )


class IntegrationEnvelope(BaseModel):
    """Point-specific shape of a delivered result, ready for the customer's process."""

    kind: str = Field(..., description="Envelope kind, e.g. analysis or custom_kpi")
    message: str
    data: dict[str, Any] = Field(default_factory=dict)


class IntegrationResult(OperationResult):
    """Result of marking a delivered output as integrated."""

    engagement_id: UUID | None = None
    output_type: str | None = None
    integration_point: str | None = None
    envelope: IntegrationEnvelope | None = None
    already_integrated: bool = False


class PendingIntegration(BaseModel):
    """A delivered output waiting to be integrated."""

    engagement_id: UUID
    output_type: str
    delivered_at: datetime
    integration_point: str | None
    provider_name: str | None = None
    offering_title: str | None = None


class BatchIntegrationResult(BaseModel):
    """Outcome of an integration sweep over a tenant."""

    processed: int = 0
    successful: int = 0
    failed: int = 0
    results: list[IntegrationResult] = Field(default_factory=list)
