"""Domain-specific exceptions for the household ledger core."""

from typing import Optional


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class RecordNotFoundError(LookupError):
    """Raised when a transaction or category cannot be located."""


class StorageReadError(IOError):
    """Persisted data is absent or malformed; callers fall back to defaults."""
