"""Lookup table of deliverable output types and their integration points."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from liaison.registry.models import IntegrationPoint, OutputType


class OutputTypeRegistry:
    """Immutable lookup of deliverable types.

    Each output type names the integration point that decides where a
    delivered result plugs into the customer's process.

    Example:
        registry.integration_point_for("copsoq_analysis")  # "phase_2.analysis"
    """

    def __init__(
        self,
        output_types: Iterable[OutputType],
        integration_points: Iterable[IntegrationPoint],
    ) -> None:
        self._types: Mapping[str, OutputType] = MappingProxyType(
            {output_type.key: output_type for output_type in output_types}
        )
        self._points: Mapping[str, IntegrationPoint] = MappingProxyType(
            {point.key: point for point in integration_points}
        )

    def __len__(self) -> int:
        return len(self._types)

    def __contains__(self, key: object) -> bool:
        return key in self._types

    def exists(self, key: str) -> bool:
        return key in self._types

    def get(self, key: str) -> OutputType | None:
        return self._types.get(key)

    def all(self) -> list[OutputType]:
        return list(self._types.values())

    def keys(self) -> list[str]:
        return list(self._types)

    def by_integration_point(self, point: str) -> list[OutputType]:
        """Get output types that plug into the given integration point."""
        return [t for t in self._types.values() if t.integration_point == point]

    def integration_point_for(self, key: str) -> str | None:
        output_type = self._types.get(key)
        return output_type.integration_point if output_type else None

    def validate(self, keys: Iterable[str]) -> list[str]:
        """Return the keys that are not registered, in input order."""
        invalid: list[str] = []
        for key in keys:
            if key not in self._types and key not in invalid:
                invalid.append(key)
        return invalid

    def legal_documents(self) -> list[OutputType]:
        return [t for t in self._types.values() if t.legal_document]

    # Integration points

    def integration_point_exists(self, point: str) -> bool:
        return point in self._points

    def get_integration_point(self, point: str) -> IntegrationPoint | None:
        return self._points.get(point)

    def all_integration_points(self) -> list[IntegrationPoint]:
        return list(self._points.values())

    def integration_points_for_phase(self, phase: int) -> list[IntegrationPoint]:
        """Get integration points that belong to a process phase."""
        return [p for p in self._points.values() if p.phase == phase]
