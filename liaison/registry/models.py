"""Registry entry models.

Entries are frozen: the registries are loaded once and never mutated.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Sensitivity(str, Enum):
    """How sensitive a category of customer data is."""

    LOW = "low"  # Metadata
    MEDIUM = "medium"  # Anonymized data
    HIGH = "high"  # Personal data


class DataScope(BaseModel):
    """A named category of customer data a provider may be allowed to see."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Scope identifier")
    label: str = Field(..., description="Human-readable label")
    description: str = Field(default="", description="What the scope contains")
    sensitivity: Sensitivity = Field(..., description="Sensitivity level")
    source: str = Field(..., description="Where the data comes from")
    example: str | None = Field(default=None, description="Illustrative value")
    gdpr_relevant: bool = Field(default=False, description="Contains personal data")


class OutputType(BaseModel):
    """A named category of deliverable a provider can hand back."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field(..., description="Output type identifier")
    label: str = Field(..., description="Human-readable label")
    description: str = Field(default="", description="What the deliverable contains")
    integration_point: str = Field(..., description="Where the result plugs in")
    schema_name: str = Field(..., alias="schema", description="Payload schema identifier")
    formats: tuple[str, ...] = Field(default=(), description="Accepted file formats")
    legal_document: bool = Field(default=False, description="Legally binding document")


class IntegrationPoint(BaseModel):
    """Symbolic address of a place in the customer's process."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Integration point identifier")
    label: str = Field(..., description="Human-readable label")
    phase: int | None = Field(default=None, description="Process phase, if phase-bound")

    @property
    def prefix(self) -> str:
        """Area of the process, e.g. ``phase_2`` for ``phase_2.analysis``."""
        return self.key.split(".", 1)[0]
