"""Error taxonomy for the engagement core.

Business-rule violations are reported as ``OperationError`` values inside
result models, so callers can branch on ``code`` without parsing messages.
Exceptions are reserved for misuse of the tenant boundary and for
aggregates that break their own invariants.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Machine-readable reasons an operation was rejected."""

    NOT_FOUND = "NOT_FOUND"
    """Engagement, offering or provider missing, or owned by another tenant."""

    INVALID_STATE = "INVALID_STATE"
    """The operation is not legal from the engagement's current status."""

    INVALID_SCOPE = "INVALID_SCOPE"
    """Unknown data scope, or one the offering did not request."""

    INVALID_OUTPUT_TYPE = "INVALID_OUTPUT_TYPE"
    """Unknown output type, or one the offering does not deliver."""

    NOT_GRANTED = "NOT_GRANTED"
    """The data scope is not currently granted."""

    NOT_DELIVERED = "NOT_DELIVERED"
    """Integration attempted before the output was delivered."""

    NO_HANDLER = "NO_HANDLER"
    """No classification handler exists for the integration point."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Malformed input."""


class OperationError(BaseModel):
    """A rejected operation."""

    model_config = ConfigDict(frozen=True)

    code: ErrorCode = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict, description="Structured context for the error"
    )


class LiaisonError(Exception):
    """Base exception for errors that are raised rather than returned."""


class BoundaryViolationError(LiaisonError):
    """Raised when tenant-internal data is requested for a provider audience."""

    def __init__(self, report: str) -> None:
        super().__init__(f"{report} is tenant-internal and cannot be shared with a provider")
        self.report = report


class InvariantViolationError(LiaisonError):
    """Raised when an aggregate is found in a state it can never legally reach."""
