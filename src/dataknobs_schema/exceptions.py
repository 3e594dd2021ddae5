"""Exception hierarchy for the dataknobs_schema package.

Two kinds of failure exist:

- Configuration errors are raised immediately when a schema is built or
  derived with invalid parameters (``pick`` of an unknown field, ``min`` on a
  boolean schema, an empty union, ...).
- Validation issues are never raised by ``validate``; they are returned in a
  ``ValidationResult``. Only ``parse`` raises, wrapping every issue in a
  single ``SchemaValidationError``.

Example:
    ```python
    from dataknobs_schema import Boolean, SchemaConfigurationError

    try:
        Boolean().min(1)
    except SchemaConfigurationError as e:
        logger.error(f"Error: {e}")
        logger.error(f"Context: {e.context}")
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict

from .result import format_issues

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .result import ValidationIssue


class SchemaError(Exception):
    """Base exception for the dataknobs_schema package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        """Initialize the exception with optional context.

        Args:
            message: Error message
            context: Optional context dictionary
            details: Optional details dictionary (takes precedence over context)
        """
        super().__init__(message)
        self.context = details or context or {}
        self.details = self.context


class SchemaConfigurationError(SchemaError):
    """Raised when a schema is constructed or derived with invalid parameters."""

    pass


class UnknownFieldError(SchemaConfigurationError):
    """Raised when a derivation names a field the object schema does not declare."""

    def __init__(self, field_name: str, available: Iterable[str]):
        self.field_name = field_name
        self.available = list(available)
        super().__init__(
            f"Unknown field '{field_name}'",
            context={"field_name": field_name, "available": self.available},
        )


class SchemaValidationError(SchemaError):
    """Raised by ``parse`` when a value does not satisfy its schema.

    Carries every issue found, not just the first one.
    """

    def __init__(self, issues: Sequence[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(
            format_issues(self.issues),
            context={"issue_count": len(self.issues)},
        )


__all__ = [
    "SchemaError",
    "SchemaConfigurationError",
    "UnknownFieldError",
    "SchemaValidationError",
]
