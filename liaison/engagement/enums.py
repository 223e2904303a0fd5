"""Enums for the engagement domain."""

from enum import Enum


class EngagementStatus(str, Enum):
    """Lifecycle status of a tenant-provider engagement.

    ``completed`` and ``cancelled`` are terminal.
    """

    DRAFT = "draft"  # Created, not yet started
    ACTIVE = "active"  # Started, waiting for data grants
    DATA_SHARED = "data_shared"  # All required scopes granted
    PROCESSING = "processing"  # Provider is working on deliverables
    DELIVERED = "delivered"  # At least one deliverable received
    COMPLETED = "completed"  # Closed by the tenant
    CANCELLED = "cancelled"  # Aborted

    @property
    def is_terminal(self) -> bool:
        return self in (EngagementStatus.COMPLETED, EngagementStatus.CANCELLED)


class Transition(str, Enum):
    """Named status transitions."""

    ACTIVATE = "activate"
    MARK_DATA_SHARED = "mark_data_shared"
    MARK_PROCESSING = "mark_processing"
    MARK_DELIVERED = "mark_delivered"
    COMPLETE = "complete"
    CANCEL = "cancel"


class ConsentAction(str, Enum):
    """Entry type in an engagement's consent history."""

    GRANTED = "granted"
    REVOKED = "revoked"


class Audience(str, Enum):
    """Who a view or report is produced for.

    The tenant is the trust boundary; anything produced for a provider
    crosses it.
    """

    TENANT = "tenant"
    PROVIDER = "provider"
