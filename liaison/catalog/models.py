"""Catalog records consumed by the engagement core."""

from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Provider(BaseModel):
    """A third-party service provider."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    company_name: str = Field(..., description="Company name")
    contact_person: str | None = Field(default=None, description="Contact person")
    contact_email: str | None = Field(default=None, description="Contact email")
    contact_phone: str | None = Field(default=None, description="Contact phone")


class Offering(BaseModel):
    """A service a provider offers, with the data it needs and the results it returns."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    provider_id: UUID = Field(..., description="Offering provider")
    title: str = Field(..., description="Offering title")
    required_data_scopes: frozenset[str] = Field(
        default_factory=frozenset, description="Data scopes the provider needs"
    )
    output_data_types: frozenset[str] = Field(
        default_factory=frozenset,
        description="Output types the provider delivers; empty means unrestricted",
    )
    is_active: bool = Field(default=True, description="Bookable")

    def requires_data_scope(self, scope: str) -> bool:
        return scope in self.required_data_scopes

    def delivers_output_type(self, output_type: str) -> bool:
        """Whether the offering accepts this output type."""
        return not self.output_data_types or output_type in self.output_data_types
