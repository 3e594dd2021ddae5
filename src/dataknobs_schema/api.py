"""Public validation entry points."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from .exceptions import SchemaValidationError
from .nodes import SchemaNode
from .result import ValidationResult, format_result
from .settings import ValidationSettings
from .validator import Validator, default_validator

logger = logging.getLogger(__name__)


def _validator_for(settings: ValidationSettings | None) -> Validator:
    if settings is None:
        return default_validator
    return Validator(settings)


def validate(
    schema: SchemaNode,
    value: Any,
    path: Sequence[Any] = (),
    settings: ValidationSettings | None = None,
) -> ValidationResult:
    """Validate a value against a schema. Never raises for invalid input.

    Args:
        schema: Schema to validate against
        value: Value to validate
        path: Path prefix for reported issues
        settings: Optional settings, the defaults strip unknown object keys

    Returns:
        ValidationResult with the normalized value or every issue found
    """
    result = _validator_for(settings).validate(schema, value, path)
    if not result.success:
        logger.debug(
            f"Validation against {schema.type_name} schema failed with {len(result.issues)} issue(s)"
        )
    return result


safe_parse = validate


def parse(
    schema: SchemaNode,
    value: Any,
    settings: ValidationSettings | None = None,
) -> Any:
    """Validate a value and return its normalized form.

    Args:
        schema: Schema to validate against
        value: Value to validate
        settings: Optional validation settings

    Returns:
        The normalized value

    Raises:
        SchemaValidationError: Aggregating every issue found
    """
    result = validate(schema, value, settings=settings)
    if not result.success:
        raise SchemaValidationError(result.issues)
    return result.data


__all__ = ["validate", "safe_parse", "parse", "format_result"]
