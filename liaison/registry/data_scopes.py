"""Lookup table of shareable data scopes."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from liaison.registry.models import DataScope, Sensitivity


class DataScopeRegistry:
    """Immutable lookup of every data scope an offering may request.

    Example:
        registry.exists("employee_list")  # True
        registry.get("employee_list").sensitivity  # Sensitivity.HIGH
    """

    def __init__(self, scopes: Iterable[DataScope]) -> None:
        self._scopes: Mapping[str, DataScope] = MappingProxyType(
            {scope.key: scope for scope in scopes}
        )

    def __len__(self) -> int:
        return len(self._scopes)

    def __contains__(self, key: object) -> bool:
        return key in self._scopes

    def exists(self, key: str) -> bool:
        return key in self._scopes

    def get(self, key: str) -> DataScope | None:
        return self._scopes.get(key)

    def all(self) -> list[DataScope]:
        return list(self._scopes.values())

    def keys(self) -> list[str]:
        return list(self._scopes)

    def by_sensitivity(self, level: Sensitivity | str) -> list[DataScope]:
        """Get scopes with the given sensitivity level."""
        wanted = Sensitivity(level)
        return [scope for scope in self._scopes.values() if scope.sensitivity == wanted]

    def gdpr_relevant(self) -> list[DataScope]:
        """Get scopes that carry personal data."""
        return [scope for scope in self._scopes.values() if scope.gdpr_relevant]

    def validate(self, keys: Iterable[str]) -> list[str]:
        """Return the keys that are not registered, in input order."""
        invalid: list[str] = []
        for key in keys:
            if key not in self._scopes and key not in invalid:
                invalid.append(key)
        return invalid

    def labels(self, keys: Iterable[str]) -> dict[str, str]:
        """Map registered keys to their labels, skipping unknown keys."""
        return {key: self._scopes[key].label for key in keys if key in self._scopes}
