"""Store error hierarchy for storage backends.

All store implementations must raise these errors for consistent error handling.
"""


class StoreError(Exception):
    """Base exception for all store errors.

    Store implementations wrap backend-specific errors in one of the
    StoreError subclasses.
    """

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class NotFoundError(StoreError):
    """Raised when an entity expected to exist is missing.

    Lookups return None; this is for writes that target a missing entity.
    """


class ConflictError(StoreError):
    """Raised when a write loses an optimistic version check.

    Two concurrent read-modify-write cycles on the same engagement
    cannot both succeed; the loser must reload and retry.
    """

    def __init__(
        self,
        message: str,
        expected_version: int | None = None,
        actual_version: int | None = None,
    ) -> None:
        super().__init__(message)
        self.expected_version = expected_version
        self.actual_version = actual_version


class ValidationError(StoreError):
    """Raised on data the store refuses to persist."""
