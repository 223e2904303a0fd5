"""Result routing configuration models."""

from pydantic import BaseModel, Field


class RoutingConfig(BaseModel):
    """Configuration for classifying delivered results."""

    legal_validity_years: dict[str, int] = Field(
        default_factory=lambda: {"psychische_gefaehrdungsbeurteilung": 2},
        description="Validity in years per fulfilled legal requirement",
    )
    default_legal_validity_years: int = Field(
        default=1,
        gt=0,
        description="Validity for legal requirements without an explicit entry",
    )

    def validity_years_for(self, requirement_type: str) -> int:
        """Return how many years a fulfilled requirement stays valid."""
        return self.legal_validity_years.get(
            requirement_type, self.default_legal_validity_years
        )
